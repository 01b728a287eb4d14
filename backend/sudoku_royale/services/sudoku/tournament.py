"""Tournament catalog and progression rules.

Three chapters of five numbered levels plus a boss each. A run passes a
level with strictly fewer mistakes than ``max_mistakes`` (none at all
when it is 0) inside the time limit; stars come from the three time
thresholds.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

SEED_BASE = 7_300_000


@dataclass(frozen=True)
class Level:
    key: str
    chapter: int
    difficulty: str
    time_limit: int
    max_mistakes: int
    stars: Tuple[int, int, int]
    seed: int
    is_boss: bool = False
    special_rule: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.key,
            'chapter': self.chapter,
            'difficulty': self.difficulty,
            'time_limit': self.time_limit,
            'max_mistakes': self.max_mistakes,
            'stars': list(self.stars),
            'is_boss': self.is_boss,
            'special_rule': self.special_rule,
        }


@dataclass(frozen=True)
class Chapter:
    number: int
    name: str
    description: str
    levels: Tuple[Level, ...]
    boss: Level


def _level(number, chapter, difficulty, time_limit, max_mistakes, stars):
    return Level(str(number), chapter, difficulty, time_limit, max_mistakes, stars, SEED_BASE + number)


def _boss(chapter, difficulty, time_limit, max_mistakes, stars, rule):
    return Level(f'boss-{chapter}', chapter, difficulty, time_limit, max_mistakes, stars,
                 SEED_BASE + 100 * chapter, is_boss=True, special_rule=rule)


CHAPTERS: Tuple[Chapter, ...] = (
    Chapter(1, 'Sudoku Apprentice', 'Master the fundamentals', (
        _level(1, 1, 'easy', 600, 5, (180, 300, 420)),
        _level(2, 1, 'easy', 480, 4, (150, 240, 360)),
        _level(3, 1, 'easy', 360, 3, (120, 200, 300)),
        _level(4, 1, 'medium', 600, 4, (240, 400, 540)),
        _level(5, 1, 'medium', 480, 3, (200, 320, 440)),
    ), _boss(1, 'hard', 600, 2, (300, 450, 570), 'No hints allowed')),
    Chapter(2, 'Logic Master', 'Sharpen your technique', (
        _level(6, 2, 'medium', 420, 3, (180, 280, 380)),
        _level(7, 2, 'hard', 600, 3, (300, 450, 550)),
        _level(8, 2, 'hard', 480, 2, (240, 360, 450)),
        _level(9, 2, 'expert', 720, 3, (420, 580, 680)),
        _level(10, 2, 'expert', 600, 2, (360, 500, 580)),
    ), _boss(2, 'master', 600, 1, (420, 540, 600), 'Expert mode')),
    Chapter(3, 'Sudoku Legend', 'The ultimate challenge', (
        _level(11, 3, 'expert', 480, 2, (300, 400, 460)),
        _level(12, 3, 'master', 660, 2, (420, 540, 620)),
        _level(13, 3, 'master', 540, 1, (360, 460, 520)),
        _level(14, 3, 'master', 480, 1, (300, 400, 450)),
        _level(15, 3, 'master', 420, 0, (240, 330, 390)),
    ), _boss(3, 'master', 480, 0, (300, 400, 450), 'Time attack + expert mode')),
)

LEVELS: Dict[str, Level] = {}
for _chapter in CHAPTERS:
    for _lvl in _chapter.levels + (_chapter.boss,):
        LEVELS[_lvl.key] = _lvl


def get_level(key) -> Optional[Level]:
    return LEVELS.get(str(key))


def within_mistakes(level: Level, mistakes: int) -> bool:
    # A threshold of 0 means the run has to be flawless.
    return mistakes < max(level.max_mistakes, 1)


def stars_for(level: Level, time: int, mistakes: int) -> int:
    if not within_mistakes(level, mistakes):
        return 0
    for earned, threshold in zip((3, 2, 1), level.stars):
        if time <= threshold:
            return earned
    return 0


def level_passed(level: Level, time: int, mistakes: int) -> bool:
    return within_mistakes(level, mistakes) and time <= level.time_limit


def is_unlocked(level: Level, completed: Mapping[str, int]) -> bool:
    """``completed`` maps level keys to best stars for one player."""
    chapter = CHAPTERS[level.chapter - 1]
    if level.is_boss:
        return all(l.key in completed for l in chapter.levels)
    number = int(level.key)
    if number == 1:
        return True
    if level is chapter.levels[0]:
        return CHAPTERS[level.chapter - 2].boss.key in completed
    return str(number - 1) in completed


def total_score(completed: Mapping[str, int]) -> int:
    return 100 * sum(completed.values())


def progress_view(completed: Mapping[str, int]) -> List[dict]:
    chapters = []
    for chapter in CHAPTERS:
        levels = []
        for level in chapter.levels + (chapter.boss,):
            entry = level.to_dict()
            entry['unlocked'] = is_unlocked(level, completed)
            entry['completed'] = level.key in completed
            entry['best_stars'] = completed.get(level.key, 0)
            levels.append(entry)
        chapters.append({
            'number': chapter.number,
            'name': chapter.name,
            'description': chapter.description,
            'levels': levels,
        })
    return chapters
