from .board import copy_board, count_clues, find_conflicts, is_placement_legal
from .daily import daily_puzzle, seed_for_date
from .evaluator import compute_progress_percent, evaluate_move, is_solved, validate_move
from .generator import DIFFICULTIES, Puzzle, cached_puzzle, generate_puzzle, generate_solved_board
from .solver import SudokuSolver, find_solution, has_unique_solution

__all__ = [
    'copy_board', 'count_clues', 'find_conflicts', 'is_placement_legal',
    'daily_puzzle', 'seed_for_date',
    'compute_progress_percent', 'evaluate_move', 'is_solved', 'validate_move',
    'DIFFICULTIES', 'Puzzle', 'cached_puzzle', 'generate_puzzle', 'generate_solved_board',
    'SudokuSolver', 'find_solution', 'has_unique_solution',
]
