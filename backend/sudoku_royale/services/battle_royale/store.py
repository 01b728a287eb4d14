import logging
import random
import string
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import RoomCodeExhausted, RoomNotFound
from ..sudoku.generator import Puzzle, generate_puzzle, time_seed, validate_difficulty
from .room import STARTING, WAITING, PlayerState, Room, RoomSettings

logger = logging.getLogger(__name__)


def generate_room_code(length: int = 6) -> str:
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


class RoomStore:
    """In-process registry of live rooms.

    The registry lock only guards the code -> room mapping. Room state is
    serialized per room through ``room.lock``, so moves in different rooms
    never wait on each other.
    """

    def __init__(self, code_factory: Optional[Callable[[], str]] = None,
                 code_length: int = 6, max_attempts: int = 10):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.code_factory = code_factory

    def configure(self, code_length: Optional[int] = None, max_attempts: Optional[int] = None) -> None:
        if code_length:
            self.code_length = code_length
        if max_attempts:
            self.max_attempts = max_attempts

    def _next_code(self) -> str:
        if self.code_factory is not None:
            return self.code_factory()
        return generate_room_code(self.code_length)

    def _unique_code(self) -> str:
        # Caller holds self._lock.
        for attempt in range(self.max_attempts):
            code = self._next_code().upper()
            if code not in self._rooms:
                return code
            logger.info(f"[room-code-collision] code={code} attempt={attempt + 1}")
        raise RoomCodeExhausted()

    # ---- registry ----

    def create(self, host_identity: str, host_handle: str, settings: RoomSettings,
               puzzle: Optional[Puzzle] = None, now: Optional[float] = None) -> Room:
        now = time.time() if now is None else now
        if puzzle is None:
            validate_difficulty(settings.difficulty)
            # CPU-bound; done before the registry lock is taken.
            puzzle = generate_puzzle(settings.difficulty, time_seed())
        with self._lock:
            code = self._unique_code()
            room = Room(code, host_identity, host_handle, puzzle, settings, now=now)
            self._rooms[code] = room
        logger.info(f"[room-create] room={code} host={host_identity} difficulty={puzzle.difficulty} clues={puzzle.clue_count}")
        return room

    def get(self, code: str) -> Room:
        room = self.find(code)
        if room is None:
            raise RoomNotFound()
        return room

    def find(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get((code or '').upper())

    def discard(self, code: str, room: Optional[Room] = None) -> None:
        """Drop a room. With ``room`` given, only if the code still maps to it."""
        code = code.upper()
        with self._lock:
            if room is not None and self._rooms.get(code) is not room:
                return
            removed = self._rooms.pop(code, None)
        if removed is not None:
            logger.info(f"[room-destroy] room={code}")

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()

    def open_rooms(self, exclude_identity: Optional[str] = None, limit: int = 20) -> List[Room]:
        with self._lock:
            rooms = list(self._rooms.values())
        rooms = [
            r for r in rooms
            if r.status in (WAITING, STARTING)
            and (exclude_identity is None or r.find_player(exclude_identity) is None)
        ]
        rooms.sort(key=lambda r: r.created_at, reverse=True)
        return rooms[:limit]

    # ---- serialized room operations ----

    def join(self, code: str, identity: str, handle: str) -> Tuple[Room, PlayerState]:
        room = self.get(code)
        with room.lock:
            player = room.join(identity, handle)
        return room, player

    def leave(self, code: str, identity: str) -> Tuple[Room, bool]:
        """Returns (room, destroyed)."""
        room = self.get(code)
        with room.lock:
            room.leave(identity)
            destroyed = not room.players
        if destroyed:
            self.discard(room.code)
        return room, destroyed

    def start(self, code: str, requester: str) -> Room:
        room = self.get(code)
        with room.lock:
            room.start(requester)
        return room

    def apply_move(self, code: str, identity: str, row: int, col: int,
                   value: int) -> Tuple[Room, dict, List[dict]]:
        """Returns (room, move result, leaderboard as of this move)."""
        room = self.get(code)
        with room.lock:
            result = room.apply_move(identity, row, col, value)
            board = room.leaderboard()
        return room, result, board
