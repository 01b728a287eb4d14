from datetime import date

import pytest

from sudoku_royale.services.sudoku import tournament
from sudoku_royale.services.sudoku.daily import daily_puzzle, parse_date, seed_for_date


def test_seed_for_date():
    assert seed_for_date('2025-11-02') == 20251102
    assert seed_for_date(date(2024, 1, 9)) == 20240109
    with pytest.raises(ValueError):
        parse_date('02/11/2025')


def test_daily_puzzle_is_same_for_everyone():
    a = daily_puzzle('2025-11-02', 'easy')
    b = daily_puzzle(date(2025, 11, 2), 'easy')
    assert a.givens == b.givens
    assert a.seed == 20251102


def test_catalog_shape():
    assert len(tournament.CHAPTERS) == 3
    assert len(tournament.LEVELS) == 18
    seeds = {level.seed for level in tournament.LEVELS.values()}
    assert len(seeds) == 18
    assert tournament.get_level('boss-2').is_boss
    assert tournament.get_level(7).key == '7'
    assert tournament.get_level('16') is None


def test_stars_for_thresholds():
    level = tournament.get_level('1')  # stars (180, 300, 420), max_mistakes 5
    assert tournament.stars_for(level, 180, 0) == 3
    assert tournament.stars_for(level, 181, 4) == 2
    assert tournament.stars_for(level, 420, 0) == 1
    assert tournament.stars_for(level, 421, 0) == 0
    assert tournament.stars_for(level, 100, 5) == 0


def test_level_passed():
    level = tournament.get_level('1')
    assert tournament.level_passed(level, 600, 4)
    assert not tournament.level_passed(level, 601, 0)
    assert not tournament.level_passed(level, 100, 5)


def test_zero_mistake_level_requires_flawless_run():
    level = tournament.get_level('15')
    assert level.max_mistakes == 0
    assert tournament.level_passed(level, 200, 0)
    assert tournament.stars_for(level, 200, 0) == 3
    assert not tournament.level_passed(level, 200, 1)


def test_unlocking():
    completed = {}
    assert tournament.is_unlocked(tournament.get_level('1'), completed)
    assert not tournament.is_unlocked(tournament.get_level('2'), completed)

    completed = {str(n): 1 for n in range(1, 5)}
    assert tournament.is_unlocked(tournament.get_level('5'), completed)
    assert not tournament.is_unlocked(tournament.get_level('boss-1'), completed)
    completed['5'] = 2
    assert tournament.is_unlocked(tournament.get_level('boss-1'), completed)

    # Next chapter opens after the boss
    assert not tournament.is_unlocked(tournament.get_level('6'), completed)
    completed['boss-1'] = 3
    assert tournament.is_unlocked(tournament.get_level('6'), completed)
    assert tournament.total_score(completed) == 100 * (4 + 2 + 3)


def test_progress_view_annotates_levels():
    view = tournament.progress_view({'1': 3})
    first = view[0]['levels'][0]
    assert first['completed'] and first['best_stars'] == 3
    assert view[0]['levels'][1]['unlocked']
    assert not view[0]['levels'][2]['unlocked']
    assert view[0]['levels'][-1]['id'] == 'boss-1'
