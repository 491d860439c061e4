"""Board model and game rules.

Everything here is pure: a ``GameState`` goes in, a new ``GameState`` comes
out. The turn controller owns the current state and is the only caller that
keeps one around between events.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple


class Mark(Enum):
    EMPTY = ''
    X = 'X'
    O = 'O'

    def opposite(self) -> "Mark":
        if self is Mark.X:
            return Mark.O
        if self is Mark.O:
            return Mark.X
        return Mark.EMPTY


ONGOING = 'ongoing'
WON = 'won'
TIED = 'tied'


class InvalidMove(Exception):
    """Raised when a move cannot be applied to the current state."""


@dataclass(frozen=True)
class Outcome:
    status: str = ONGOING
    winner: Optional[Mark] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != ONGOING

    def to_dict(self):
        return {
            'status': self.status,
            'winner': self.winner.value if self.winner else None,
        }


def generate_win_combinations(size: int) -> Tuple[Tuple[int, ...], ...]:
    """Rows and columns for every i, then the two diagonals.

    Always 2N + 2 entries; for N == 1 they are all ``(0,)``.
    """
    if size < 1:
        raise ValueError(f"board size must be at least 1, got {size}")
    combinations = []
    for i in range(size):
        combinations.append(tuple(i * size + j for j in range(size)))
        combinations.append(tuple(j * size + i for j in range(size)))
    combinations.append(tuple(i * size + i for i in range(size)))
    combinations.append(tuple((i + 1) * size - (i + 1) for i in range(size)))
    return tuple(combinations)


@dataclass(frozen=True)
class GameState:
    size: int
    cells: Tuple[Mark, ...]
    win_combinations: Tuple[Tuple[int, ...], ...]
    turn: Mark = Mark.X
    outcome: Outcome = field(default_factory=Outcome)
    epoch: int = 0

    def empty_cells(self):
        return [i for i, cell in enumerate(self.cells) if cell is Mark.EMPTY]

    def is_full(self) -> bool:
        return all(cell is not Mark.EMPTY for cell in self.cells)

    def count(self, mark: Mark) -> int:
        return sum(1 for cell in self.cells if cell is mark)

    def to_dict(self):
        return {
            'board_size': self.size,
            'cells': [cell.value for cell in self.cells],
            'turn': self.turn.value,
            'outcome': self.outcome.to_dict(),
            'epoch': self.epoch,
        }


def new_game(size: int, epoch: int = 0) -> GameState:
    return GameState(
        size=size,
        cells=(Mark.EMPTY,) * (size * size),
        win_combinations=generate_win_combinations(size),
        epoch=epoch,
    )


def reset(state: GameState) -> GameState:
    """Empty board, X to move, next epoch. Win combinations are kept."""
    return replace(
        state,
        cells=(Mark.EMPTY,) * (state.size * state.size),
        turn=Mark.X,
        outcome=Outcome(),
        epoch=state.epoch + 1,
    )


def resize(state: GameState, size: int) -> GameState:
    return new_game(size, epoch=state.epoch + 1)


def check_win(state: GameState, mark: Mark) -> bool:
    if mark is Mark.EMPTY:
        return False
    return any(
        all(state.cells[index] is mark for index in combination)
        for combination in state.win_combinations
    )


def evaluate(state: GameState, mover: Mark) -> Outcome:
    """Outcome after ``mover`` has just played."""
    if check_win(state, mover):
        return Outcome(WON, mover)
    if state.is_full():
        return Outcome(TIED)
    return Outcome()


def apply_move(state: GameState, index: int, player: Optional[Mark] = None) -> GameState:
    """Place the current player's mark at ``index``.

    ``player`` names the acting side when the caller knows it (the computer
    always does); a mismatch with ``state.turn`` is an out-of-turn move.
    """
    if state.outcome.is_terminal:
        raise InvalidMove('game is already over')
    if player is not None and player is not state.turn:
        raise InvalidMove(f"not {player.value}'s turn")
    if not 0 <= index < len(state.cells):
        raise InvalidMove(f"cell {index} is off the board")
    if state.cells[index] is not Mark.EMPTY:
        raise InvalidMove(f"cell {index} is already occupied")

    mover = state.turn
    cells = list(state.cells)
    cells[index] = mover
    placed = replace(state, cells=tuple(cells))
    outcome = evaluate(placed, mover)
    if outcome.is_terminal:
        return replace(placed, outcome=outcome)
    return replace(placed, turn=mover.opposite(), outcome=outcome)
