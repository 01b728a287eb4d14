from typing import NamedTuple, Optional, Sequence

from ..errors import InvalidMove
from .board import SIZE

Rows = Sequence[Sequence[int]]


class MoveEvaluation(NamedTuple):
    is_correct: bool


def validate_move(row, col, value) -> None:
    for v, hi in ((row, SIZE - 1), (col, SIZE - 1), (value, SIZE)):
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= hi:
            raise InvalidMove()


def evaluate_move(board: Rows, solution: Rows, row: int, col: int, new_value: int) -> MoveEvaluation:
    # Clearing a cell is never penalized.
    return MoveEvaluation(is_correct=new_value == 0 or new_value == solution[row][col])


def compute_progress_percent(board: Rows, solution: Rows, givens: Optional[Rows] = None) -> int:
    """Integer percentage of fillable cells that hold the solution value.

    Fillable cells are the nonzero cells of ``solution``; when ``givens``
    is passed, cells that were given in the puzzle are excluded so the
    figure measures only what the player filled in. Halves round up.
    """
    total = 0
    correct = 0
    for r in range(SIZE):
        for c in range(SIZE):
            if solution[r][c] == 0:
                continue
            if givens is not None and givens[r][c] != 0:
                continue
            total += 1
            if board[r][c] == solution[r][c]:
                correct += 1
    if total == 0:
        return 0
    return (200 * correct + total) // (2 * total)


def is_solved(board: Rows, solution: Rows) -> bool:
    return all(board[r][c] == solution[r][c] for r in range(SIZE) for c in range(SIZE))
