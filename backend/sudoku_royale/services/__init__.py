"""Game domain services: puzzle engine, Battle Royale rooms and timers,
single-player sessions.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""
