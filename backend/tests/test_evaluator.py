import pytest

from sudoku_royale.services.errors import InvalidMove
from sudoku_royale.services.sudoku.board import copy_board
from sudoku_royale.services.sudoku.evaluator import (
    compute_progress_percent,
    evaluate_move,
    is_solved,
    validate_move,
)


def test_full_solution_is_100(easy_puzzle):
    assert compute_progress_percent(easy_puzzle.solution, easy_puzzle.solution) == 100
    assert compute_progress_percent(easy_puzzle.solution, easy_puzzle.solution, easy_puzzle.givens) == 100
    assert is_solved(easy_puzzle.solution, easy_puzzle.solution)


def test_givens_alone_below_100(easy_puzzle):
    assert compute_progress_percent(easy_puzzle.givens, easy_puzzle.solution) < 100
    assert compute_progress_percent(easy_puzzle.givens, easy_puzzle.solution, easy_puzzle.givens) == 0


def test_progress_rounds_half_up():
    solution = [[1] * 9 for _ in range(9)]
    givens = [[1] * 9 for _ in range(9)]
    # Leave eight fillable cells, fill one of them: 12.5 -> 13
    for c in range(8):
        givens[8][c] = 0
    board = copy_board(givens)
    board[8][0] = 1
    assert compute_progress_percent(board, solution, givens) == 13


def test_correct_and_wrong_moves(easy_puzzle, open_cells):
    row, col = open_cells[0]
    right = easy_puzzle.solution[row][col]
    wrong = right % 9 + 1
    board = easy_puzzle.givens_copy()
    before = compute_progress_percent(board, easy_puzzle.solution, easy_puzzle.givens)

    assert evaluate_move(board, easy_puzzle.solution, row, col, right).is_correct
    board[row][col] = right
    assert compute_progress_percent(board, easy_puzzle.solution, easy_puzzle.givens) > before

    board[row][col] = wrong
    assert not evaluate_move(board, easy_puzzle.solution, row, col, wrong).is_correct
    assert compute_progress_percent(board, easy_puzzle.solution, easy_puzzle.givens) == before

    # Clearing a cell is never a mistake
    assert evaluate_move(board, easy_puzzle.solution, row, col, 0).is_correct


@pytest.mark.parametrize('row,col,value', [
    (-1, 0, 1), (9, 0, 1), (0, 9, 1), (0, 0, 10), (0, 0, -1), (None, 0, 1), (0, 0, '5'), (True, 0, 1),
])
def test_validate_move_rejects_out_of_range(row, col, value):
    with pytest.raises(InvalidMove):
        validate_move(row, col, value)


def test_validate_move_accepts_bounds():
    validate_move(0, 0, 0)
    validate_move(8, 8, 9)
