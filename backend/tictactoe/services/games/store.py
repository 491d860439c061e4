"""Score, name and mode persistence for a table.

Values live in the ``setting`` table as plain strings under the same keys the
browser client has always used, so a missing or garbled row simply means the
default.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from tictactoe import db
from tictactoe.models import Setting, Table


SCORE_X_KEY = 'playerXScore'
SCORE_O_KEY = 'playerOScore'
PLAYER1_NAME_KEY = 'player1Name'
PLAYER2_NAME_KEY = 'player2Name'
SOLO_MODE_KEY = 'isSoloMode'

DEFAULT_PLAYER1_NAME = 'Player 1'
DEFAULT_PLAYER2_NAME = 'Player 2'
COMPUTER_NAME = 'Computer'


@dataclass
class ScoreRecord:
    x_wins: int = 0
    o_wins: int = 0


@dataclass
class PlayerNames:
    player1: str = DEFAULT_PLAYER1_NAME
    player2: str = DEFAULT_PLAYER2_NAME


def _parse_int(raw: Optional[str]) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 0
    return value if value >= 0 else 0


class SettingsStore:
    def __init__(self, table_id: int):
        self.table_id = table_id

    def _get(self, key: str) -> Optional[str]:
        row = Setting.query.filter_by(table_id=self.table_id, key=key).first()
        return row.value if row else None

    def _set_many(self, values) -> None:
        try:
            for key, value in values.items():
                row = Setting.query.filter_by(table_id=self.table_id, key=key).first()
                if row is None:
                    row = Setting(table_id=self.table_id, key=key)
                row.value = value
                db.session.add(row)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def load(self) -> Tuple[ScoreRecord, PlayerNames, bool]:
        scores = ScoreRecord(
            x_wins=_parse_int(self._get(SCORE_X_KEY)),
            o_wins=_parse_int(self._get(SCORE_O_KEY)),
        )
        names = PlayerNames(
            player1=self._get(PLAYER1_NAME_KEY) or DEFAULT_PLAYER1_NAME,
            player2=self._get(PLAYER2_NAME_KEY) or DEFAULT_PLAYER2_NAME,
        )
        solo_mode = self._get(SOLO_MODE_KEY) == 'true'
        return scores, names, solo_mode

    def save_score(self, scores: ScoreRecord) -> None:
        self._set_many({
            SCORE_X_KEY: str(scores.x_wins),
            SCORE_O_KEY: str(scores.o_wins),
        })

    def save_names(self, names: PlayerNames) -> None:
        self._set_many({
            PLAYER1_NAME_KEY: names.player1,
            PLAYER2_NAME_KEY: names.player2,
        })

    def save_mode(self, solo_mode: bool) -> None:
        self._set_many({SOLO_MODE_KEY: 'true' if solo_mode else 'false'})

    def save_board_size(self, size: int) -> None:
        try:
            table = db.session.get(Table, self.table_id)
            if table is not None:
                table.board_size = size
                db.session.add(table)
                db.session.commit()
        except Exception:
            db.session.rollback()
            raise
