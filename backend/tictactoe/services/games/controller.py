"""Turn controller: one per table.

Owns the table's ``GameState`` plus everything around it (names, scores,
solo mode, reset confirmation, status line) and turns UI events into state
transitions. Delayed effects go through the scheduler and are tied to the
epoch they were scheduled in.
"""

import logging
import threading
from typing import Callable, Optional

from . import rules
from .computer import ComputerPlayer
from .rules import GameState, InvalidMove, Mark, TIED, WON
from .store import (
    COMPUTER_NAME,
    DEFAULT_PLAYER1_NAME,
    DEFAULT_PLAYER2_NAME,
    PlayerNames,
    ScoreRecord,
)

SOLO_MODE_STATUS = 'Solo Mode: Play against the computer'
MULTIPLAYER_MODE_STATUS = 'Multiplayer Mode: Play against a friend'
TIE_STATUS = "It's a Tie!"


class TurnController:
    def __init__(
        self,
        table_code: str,
        state: GameState,
        store,
        scheduler,
        computer: Optional[ComputerPlayer] = None,
        logger: Optional[logging.Logger] = None,
        on_change: Optional[Callable[[dict], None]] = None,
        auto_reset_delay: float = 5.0,
        computer_move_delay: float = 1.0,
        min_board_size: int = 1,
        max_board_size: int = 10,
    ):
        self.table_code = table_code
        self.state = state
        self.store = store
        self.scheduler = scheduler
        self.computer = computer or ComputerPlayer()
        self.logger = logger or logging.getLogger(__name__)
        self.on_change = on_change
        self.auto_reset_delay = auto_reset_delay
        self.computer_move_delay = computer_move_delay
        self.min_board_size = min_board_size
        self.max_board_size = max_board_size

        self.scores, self.names, self.solo_mode = store.load()
        self.reset_pending = False
        self._computer_ticket = 0
        self.status = SOLO_MODE_STATUS if self.solo_mode else MULTIPLAYER_MODE_STATUS
        self._lock = threading.RLock()

    # ---- helpers ----

    def player_name(self, mark: Mark) -> str:
        if mark is Mark.X:
            return self.names.player1
        return COMPUTER_NAME if self.solo_mode else self.names.player2

    def _turn_status(self) -> str:
        return f"{self.player_name(self.state.turn)}'s Turn"

    def _publish(self) -> None:
        if self.on_change:
            self.on_change(self.snapshot())

    def _schedule(self, delay: float, action: Callable[[], None], label: str) -> None:
        epoch = self.state.epoch

        def _fire():
            with self._lock:
                if self.state.epoch != epoch:
                    self.logger.info(
                        f"[timer-abort] table={self.table_code} {label} scheduled_epoch={epoch} current_epoch={self.state.epoch}"
                    )
                    return
                action()

        self.scheduler.call_later(delay, _fire, f"table={self.table_code} {label} epoch={epoch}")

    def _play(self, index: int, player: Optional[Mark]) -> bool:
        try:
            new_state = rules.apply_move(self.state, index, player)
        except InvalidMove as exc:
            self.logger.debug(f"[move-rejected] table={self.table_code} index={index} reason={exc}")
            return False

        mover = self.state.turn
        self.state = new_state
        self.logger.info(f"[move] table={self.table_code} mark={mover.value} index={index}")

        outcome = new_state.outcome
        if outcome.status == WON:
            self._record_win(outcome.winner)
            self.status = f"{self.player_name(outcome.winner)} Wins!"
            self.logger.info(f"[win] table={self.table_code} winner={outcome.winner.value}")
            self._schedule(self.auto_reset_delay, self._reset_board, 'auto-reset')
        elif outcome.status == TIED:
            self.status = TIE_STATUS
            self.logger.info(f"[tie] table={self.table_code}")
            self._schedule(self.auto_reset_delay, self._reset_board, 'auto-reset')
        else:
            self.status = self._turn_status()
            self._schedule_computer_if_due()
        self._publish()
        return True

    def _record_win(self, mark: Mark) -> None:
        if mark is Mark.X:
            self.scores.x_wins += 1
        else:
            self.scores.o_wins += 1
        self.store.save_score(self.scores)

    def _schedule_computer_if_due(self) -> None:
        if self.solo_mode and self.state.turn is Mark.O and not self.state.outcome.is_terminal:
            # Only the most recently scheduled computer move may play.
            self._computer_ticket += 1
            ticket = self._computer_ticket
            self._schedule(
                self.computer_move_delay,
                lambda: self._computer_move(ticket),
                f"computer-move ticket={ticket}",
            )

    def _computer_move(self, ticket: int) -> None:
        if ticket != self._computer_ticket:
            self.logger.info(f"[timer-abort] table={self.table_code} computer-move ticket={ticket} superseded")
            return
        # Mode or turn may have changed since this was scheduled.
        if not self.solo_mode or self.state.turn is not Mark.O or self.state.outcome.is_terminal:
            return
        index = self.computer.choose_move(self.state)
        self.logger.info(f"[computer-move] table={self.table_code} index={index}")
        self._play(index, Mark.O)

    def _reset_board(self) -> None:
        self.state = rules.reset(self.state)
        self.status = self._turn_status()
        self.logger.info(f"[reset] table={self.table_code} epoch={self.state.epoch}")
        self._publish()

    # ---- UI events ----

    def select_cell(self, index: int) -> bool:
        """Human move. Returns False when the move was ignored.

        In solo mode the human only ever plays X.
        """
        with self._lock:
            return self._play(index, Mark.X if self.solo_mode else None)

    def request_reset(self) -> None:
        with self._lock:
            self.reset_pending = True
            self._publish()

    def confirm_reset(self) -> bool:
        with self._lock:
            if not self.reset_pending:
                return False
            self.reset_pending = False
            self._reset_board()
            return True

    def cancel_reset(self) -> None:
        with self._lock:
            self.reset_pending = False
            self._publish()

    def reset(self) -> None:
        with self._lock:
            self._reset_board()

    def change_size(self, size: int) -> None:
        if not self.min_board_size <= size <= self.max_board_size:
            raise ValueError(
                f"board size must be between {self.min_board_size} and {self.max_board_size}"
            )
        with self._lock:
            self.state = rules.resize(self.state, size)
            self.store.save_board_size(size)
            self.status = self._turn_status()
            self.logger.info(f"[resize] table={self.table_code} size={size} epoch={self.state.epoch}")
            self._publish()

    def reset_scores(self) -> None:
        with self._lock:
            self.scores = ScoreRecord()
            self.store.save_score(self.scores)
            self._publish()

    def update_names(self, player1: Optional[str], player2: Optional[str]) -> None:
        with self._lock:
            self.names = PlayerNames(
                player1=(player1 or '').strip() or DEFAULT_PLAYER1_NAME,
                player2=(player2 or '').strip() or DEFAULT_PLAYER2_NAME,
            )
            self.store.save_names(self.names)
            self.status = f"{self.names.player1}'s Turn"
            self._publish()

    def toggle_solo_mode(self) -> bool:
        with self._lock:
            self.solo_mode = not self.solo_mode
            self.store.save_mode(self.solo_mode)
            self.status = SOLO_MODE_STATUS if self.solo_mode else MULTIPLAYER_MODE_STATUS
            self.logger.info(f"[solo] table={self.table_code} solo_mode={self.solo_mode}")
            self._schedule_computer_if_due()
            self._publish()
            return self.solo_mode

    def snapshot(self) -> dict:
        with self._lock:
            payload = self.state.to_dict()
            payload.update({
                'table_code': self.table_code,
                'status': self.status,
                'solo_mode': self.solo_mode,
                'reset_pending': self.reset_pending,
                'scores': {'X': self.scores.x_wins, 'O': self.scores.o_wins},
                'names': {'X': self.player_name(Mark.X), 'O': self.player_name(Mark.O)},
            })
            return payload
