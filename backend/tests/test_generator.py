import random

import pytest

from sudoku_royale.services.errors import InvalidDifficulty
from sudoku_royale.services.sudoku.board import find_conflicts
from sudoku_royale.services.sudoku.generator import (
    DIFFICULTY_CLUES,
    cached_puzzle,
    generate_puzzle,
    generate_solved_board,
)
from sudoku_royale.services.sudoku.solver import has_unique_solution


def test_same_seed_same_puzzle():
    first = generate_puzzle('hard', 20250101)
    second = generate_puzzle('hard', 20250101)
    assert first.givens == second.givens
    assert first.solution == second.solution
    assert first.seed == 20250101


def test_different_seeds_differ():
    assert generate_puzzle('easy', 1).solution != generate_puzzle('easy', 2).solution


@pytest.mark.parametrize('seed', [7, 99, 20251102])
def test_generated_puzzle_is_sound(seed):
    puzzle = generate_puzzle('easy', seed)
    assert find_conflicts(puzzle.solution) == set()
    assert all(v != 0 for row in puzzle.solution for v in row)
    assert has_unique_solution(puzzle.givens)
    # Every given agrees with the solution
    for r in range(9):
        for c in range(9):
            if puzzle.givens[r][c]:
                assert puzzle.givens[r][c] == puzzle.solution[r][c]


def test_clue_count_tracks_difficulty():
    easy = generate_puzzle('easy', 31337)
    master = generate_puzzle('master', 31337)
    assert easy.clue_count >= master.clue_count
    # Removal stops at the floor; it may fall short of it but never below.
    assert easy.clue_count >= DIFFICULTY_CLUES['easy'][0]
    assert master.clue_count >= DIFFICULTY_CLUES['master'][0]
    assert has_unique_solution(master.givens)


def test_solved_board_uses_passed_generator():
    a = generate_solved_board(random.Random(5))
    b = generate_solved_board(random.Random(5))
    assert a == b
    assert find_conflicts(a) == set()


def test_unknown_difficulty_rejected():
    with pytest.raises(InvalidDifficulty):
        generate_puzzle('impossible', 1)


def test_cached_puzzle_reuses_instance():
    assert cached_puzzle('easy', 4242) is cached_puzzle('easy', 4242)


def test_to_dict_hides_solution_unless_asked(easy_puzzle):
    data = easy_puzzle.to_dict()
    assert 'solution' not in data
    assert data['clues'] == easy_puzzle.clue_count
    assert easy_puzzle.to_dict(include_solution=True)['solution'] == [list(r) for r in easy_puzzle.solution]
