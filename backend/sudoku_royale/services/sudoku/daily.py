from datetime import date, datetime, timezone
from typing import Union

from .generator import Puzzle, cached_puzzle

DateLike = Union[date, str]


def today() -> date:
    return datetime.now(timezone.utc).date()


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def seed_for_date(value: DateLike) -> int:
    """Daily seed, ``year*10000 + month*100 + day`` (2025-11-02 -> 20251102)."""
    d = parse_date(value)
    return d.year * 10000 + d.month * 100 + d.day


def daily_puzzle(value: DateLike, difficulty: str = 'hard') -> Puzzle:
    return cached_puzzle(difficulty, seed_for_date(value))
