import random
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from ..errors import InvalidDifficulty
from .board import BOX, SIZE, copy_board, count_clues, empty_board, freeze_board
from .solver import SudokuSolver, find_solution

FrozenGrid = Tuple[Tuple[int, ...], ...]

# (min_clues, max_clues) per difficulty. Removal stops at min_clues.
DIFFICULTY_CLUES = {
    'easy': (40, 45),
    'medium': (32, 35),
    'hard': (28, 31),
    'expert': (24, 27),
    'master': (22, 24),
}
DIFFICULTIES = tuple(DIFFICULTY_CLUES)


@dataclass(frozen=True)
class Puzzle:
    givens: FrozenGrid
    solution: FrozenGrid
    seed: int
    difficulty: str
    clue_count: int

    def givens_copy(self):
        return copy_board(self.givens)

    def to_dict(self, include_solution: bool = False) -> dict:
        data = {
            'puzzle': copy_board(self.givens),
            'seed': self.seed,
            'difficulty': self.difficulty,
            'clues': self.clue_count,
        }
        if include_solution:
            data['solution'] = copy_board(self.solution)
        return data


def validate_difficulty(difficulty: str) -> str:
    if difficulty not in DIFFICULTY_CLUES:
        raise InvalidDifficulty(f"Unknown difficulty '{difficulty}', expected one of {', '.join(DIFFICULTIES)}")
    return difficulty


def time_seed() -> int:
    return int(time.time() * 1000)


def generate_solved_board(rng: random.Random):
    """Build a complete, valid board from the given random source.

    The three diagonal boxes share no row, column or box, so each is
    filled with an independent shuffle of 1..9; the solver then completes
    the remaining six boxes deterministically.
    """
    board = empty_board()
    for box in range(0, SIZE, BOX):
        nums = list(range(1, SIZE + 1))
        rng.shuffle(nums)
        idx = 0
        for i in range(BOX):
            for j in range(BOX):
                board[box + i][box + j] = nums[idx]
                idx += 1
    return find_solution(board)


def generate_puzzle(difficulty: str, seed: Optional[int] = None) -> Puzzle:
    """Generate a puzzle with a unique solution for ``difficulty``.

    Cells are removed in an order shuffled by the seeded generator; a
    removal is kept only if the board still has exactly one completion.
    The clue target is soft: if every remaining removal would break
    uniqueness, the puzzle keeps more clues than the target.
    """
    validate_difficulty(difficulty)
    if seed is None:
        seed = time_seed()
    rng = random.Random(seed)
    min_clues = DIFFICULTY_CLUES[difficulty][0]

    solution = generate_solved_board(rng)
    puzzle = copy_board(solution)
    positions = [(r, c) for r in range(SIZE) for c in range(SIZE)]
    rng.shuffle(positions)

    clues = SIZE * SIZE
    for row, col in positions:
        if clues <= min_clues:
            break
        backup = puzzle[row][col]
        puzzle[row][col] = 0
        if not SudokuSolver(puzzle).has_unique_solution():
            puzzle[row][col] = backup
            continue
        clues -= 1

    return Puzzle(
        givens=freeze_board(puzzle),
        solution=freeze_board(solution),
        seed=seed,
        difficulty=difficulty,
        clue_count=count_clues(puzzle),
    )


@lru_cache(maxsize=64)
def cached_puzzle(difficulty: str, seed: int) -> Puzzle:
    """Generation is CPU-bound; repeated (difficulty, seed) pairs reuse it."""
    return generate_puzzle(difficulty, seed)
