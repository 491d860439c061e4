import random
from typing import Optional

from .rules import GameState


class ComputerPlayer:
    """Plays O in solo mode by picking any empty cell at random."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_move(self, state: GameState) -> int:
        empty = state.empty_cells()
        if not empty:
            raise ValueError('no empty cell to play')
        return self.rng.choice(empty)
