"""Battle Royale: rooms, their registry, and the elimination scheduler.

``rooms`` and ``scheduler`` are process-wide, like the Socket.IO server
that broadcasts their events.
"""

from .room import ACTIVE, FINISHED, STARTING, WAITING, PlayerState, Room, RoomSettings
from .scheduler import EliminationScheduler, elimination_count, run_elimination_sweep
from .store import RoomStore

rooms = RoomStore()
scheduler = EliminationScheduler(rooms)

__all__ = [
    'ACTIVE', 'FINISHED', 'STARTING', 'WAITING',
    'PlayerState', 'Room', 'RoomSettings',
    'EliminationScheduler', 'elimination_count', 'run_elimination_sweep',
    'RoomStore', 'rooms', 'scheduler',
]
