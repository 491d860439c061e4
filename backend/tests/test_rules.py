import random

import pytest

from tictactoe.services.games import rules
from tictactoe.services.games.computer import ComputerPlayer
from tictactoe.services.games.rules import InvalidMove, Mark


def _play(state, *indices):
    for index in indices:
        state = rules.apply_move(state, index)
    return state


@pytest.mark.parametrize('size', [1, 2, 3, 4, 5, 7])
def test_win_combinations_shape(size):
    combos = rules.generate_win_combinations(size)
    assert len(combos) == 2 * size + 2
    for combo in combos:
        assert len(combo) == size
        assert all(0 <= index < size * size for index in combo)


def test_win_combinations_for_three():
    combos = rules.generate_win_combinations(3)
    assert set(combos) == {
        (0, 1, 2), (3, 4, 5), (6, 7, 8),
        (0, 3, 6), (1, 4, 7), (2, 5, 8),
        (0, 4, 8), (2, 4, 6),
    }


def test_win_combinations_are_deterministic():
    assert set(rules.generate_win_combinations(4)) == set(rules.generate_win_combinations(4))


def test_win_combinations_reject_empty_board():
    with pytest.raises(ValueError):
        rules.generate_win_combinations(0)


def test_new_game_is_empty_with_x_to_move():
    state = rules.new_game(4)
    assert len(state.cells) == 16
    assert state.empty_cells() == list(range(16))
    assert state.turn is Mark.X
    assert state.outcome.status == rules.ONGOING


def test_occupied_cell_is_rejected_and_board_unchanged():
    state = _play(rules.new_game(3), 4)
    with pytest.raises(InvalidMove):
        rules.apply_move(state, 4)
    # the input state is never mutated
    assert state.cells[4] is Mark.X
    assert state.turn is Mark.O


def test_off_board_index_is_rejected():
    state = rules.new_game(3)
    with pytest.raises(InvalidMove):
        rules.apply_move(state, 9)
    with pytest.raises(InvalidMove):
        rules.apply_move(state, -1)


def test_out_of_turn_player_is_rejected():
    state = rules.new_game(3)
    with pytest.raises(InvalidMove):
        rules.apply_move(state, 0, Mark.O)
    assert rules.apply_move(state, 0, Mark.X).cells[0] is Mark.X


def test_top_row_win_for_x():
    state = _play(rules.new_game(3), 0, 4, 1, 5, 2)
    assert state.outcome.status == rules.WON
    assert state.outcome.winner is Mark.X
    assert rules.check_win(state, Mark.X)
    assert not rules.check_win(state, Mark.O)


def test_no_moves_after_game_is_won():
    state = _play(rules.new_game(3), 0, 4, 1, 5, 2)
    with pytest.raises(InvalidMove):
        rules.apply_move(state, 8)


def test_full_board_without_line_is_a_tie():
    # X O X / X O O / O X X
    state = _play(rules.new_game(3), 0, 1, 2, 4, 3, 5, 7, 6, 8)
    assert state.is_full()
    assert state.outcome.status == rules.TIED
    assert state.outcome.winner is None


def test_win_on_last_cell_is_a_win_not_a_tie():
    # X O X / X O O / X X O -> X completes the left column on the ninth move
    state = _play(rules.new_game(3), 0, 1, 2, 4, 3, 5, 7, 8, 6)
    assert state.is_full()
    assert state.outcome.status == rules.WON
    assert state.outcome.winner is Mark.X


def test_anti_diagonal_win_on_four_by_four():
    # X on 3, 6, 9, 12; O on the first column
    state = _play(rules.new_game(4), 3, 0, 6, 4, 9, 8, 12)
    assert state.outcome.winner is Mark.X


def test_single_cell_board_is_won_by_first_move():
    state = rules.apply_move(rules.new_game(1), 0)
    assert state.outcome.status == rules.WON
    assert state.outcome.winner is Mark.X


def test_reset_clears_board_and_advances_epoch():
    state = _play(rules.new_game(3), 0, 4, 1)
    fresh = rules.reset(state)
    assert fresh.cells == (Mark.EMPTY,) * 9
    assert fresh.turn is Mark.X
    assert fresh.outcome.status == rules.ONGOING
    assert fresh.epoch == state.epoch + 1


def test_resize_recomputes_combinations():
    state = rules.resize(rules.new_game(3), 5)
    assert state.size == 5
    assert len(state.cells) == 25
    assert len(state.win_combinations) == 12
    assert state.epoch == 1


@pytest.mark.parametrize('seed', range(20))
def test_mark_counts_stay_balanced(seed):
    rng = random.Random(seed)
    state = rules.new_game(rng.choice([3, 4, 5]))
    while not state.outcome.is_terminal:
        state = rules.apply_move(state, rng.choice(state.empty_cells()))
        x_count = state.count(Mark.X)
        o_count = state.count(Mark.O)
        assert x_count - o_count in (0, 1)


def test_computer_picks_an_empty_cell():
    state = _play(rules.new_game(3), 0, 1, 2, 4, 3, 5, 7)
    computer = ComputerPlayer(random.Random(3))
    for _ in range(20):
        assert computer.choose_move(state) in (6, 8)


def test_computer_is_reproducible_with_a_seed():
    state = rules.new_game(5)
    first = [ComputerPlayer(random.Random(11)).choose_move(state) for _ in range(3)]
    second = [ComputerPlayer(random.Random(11)).choose_move(state) for _ in range(3)]
    assert first == second


def test_computer_needs_an_empty_cell():
    state = _play(rules.new_game(3), 0, 1, 2, 4, 3, 5, 7, 6, 8)
    with pytest.raises(ValueError):
        ComputerPlayer().choose_move(state)
