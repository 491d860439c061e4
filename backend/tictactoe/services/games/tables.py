"""Live table controllers, keyed by table code.

Controllers are runtime-only; the database keeps what must survive a restart
(board size, scores, names, mode) and a missing controller is rebuilt from it.
"""

import random
import threading
import time
from typing import Dict, Optional

from tictactoe import db, socketio
from tictactoe.models import Table
from . import rules
from .computer import ComputerPlayer
from .controller import TurnController
from .scheduler import make_scheduler
from .store import SettingsStore


_controllers: Dict[str, TurnController] = {}
_last_access: Dict[str, float] = {}
_registry_lock = threading.Lock()


def _emit_state(snapshot: dict) -> None:
    code = snapshot['table_code']
    socketio.emit('state_update', snapshot, to=f"table:{code}", namespace='/ws')


def _build_controller(app, table: Table) -> TurnController:
    cfg = app.config
    seed = cfg.get('COMPUTER_SEED')
    return TurnController(
        table_code=table.table_code,
        state=rules.new_game(int(table.board_size)),
        store=SettingsStore(table.id),
        scheduler=make_scheduler(app),
        computer=ComputerPlayer(random.Random(seed) if seed is not None else None),
        logger=app.logger,
        on_change=_emit_state,
        auto_reset_delay=float(cfg.get('AUTO_RESET_DELAY_SEC', 5)),
        computer_move_delay=float(cfg.get('COMPUTER_MOVE_DELAY_SEC', 1)),
        min_board_size=int(cfg.get('MIN_BOARD_SIZE', 1)),
        max_board_size=int(cfg.get('MAX_BOARD_SIZE', 10)),
    )


def evict_idle_tables(app, now: Optional[float] = None) -> int:
    """Forget controllers nobody has touched for TABLE_IDLE_TIMEOUT_SEC.

    The database keeps what matters; the next request rebuilds the table.
    """
    timeout = float(app.config.get('TABLE_IDLE_TIMEOUT_SEC', 3600))
    now = time.time() if now is None else now
    with _registry_lock:
        idle = [code for code, seen in _last_access.items() if now - seen > timeout]
        for code in idle:
            _controllers.pop(code, None)
            _last_access.pop(code, None)
    for code in idle:
        app.logger.info(f"[table-evict] table={code}")
    return len(idle)


def create_table(app, board_size: Optional[int] = None) -> TurnController:
    size = int(board_size if board_size is not None else app.config.get('DEFAULT_BOARD_SIZE', 3))
    min_size = int(app.config.get('MIN_BOARD_SIZE', 1))
    max_size = int(app.config.get('MAX_BOARD_SIZE', 10))
    if not min_size <= size <= max_size:
        raise ValueError(f"board size must be between {min_size} and {max_size}")

    evict_idle_tables(app)
    table = Table(board_size=size)
    db.session.add(table)
    db.session.commit()
    controller = _build_controller(app, table)
    with _registry_lock:
        _controllers[table.table_code] = controller
        _last_access[table.table_code] = time.time()
    app.logger.info(f"[table-create] table={table.table_code} size={size}")
    return controller


def get_controller(app, table_code: str) -> Optional[TurnController]:
    code = (table_code or '').upper()
    evict_idle_tables(app)
    with _registry_lock:
        controller = _controllers.get(code)
        if controller is None:
            table = Table.query.filter_by(table_code=code).first()
            if table is None:
                return None
            controller = _build_controller(app, table)
            _controllers[code] = controller
            app.logger.info(f"[table-restore] table={code} size={table.board_size}")
        _last_access[code] = time.time()
        return controller


def reset_registry() -> None:
    with _registry_lock:
        _controllers.clear()
        _last_access.clear()
