import math
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from sudoku_royale import socketio
from .archive import archive_match
from .room import ACTIVE, STARTING, Room, RoundRecord
from .store import RoomStore

NAMESPACE = '/battle-royale'


def elimination_count(alive_count: int, fraction: float) -> int:
    """At least one, never more than half of the field, scaled by fraction."""
    return max(1, min(math.floor(alive_count * fraction), alive_count // 2))


@dataclass
class SweepResult:
    round_number: Optional[int] = None
    eliminated: List[dict] = field(default_factory=list)
    players_remaining: int = 0
    finished: bool = False

    def to_dict(self):
        return {
            'round': self.round_number,
            'eliminated': list(self.eliminated),
            'players_remaining': self.players_remaining,
        }


def run_elimination_sweep(room: Room, now: Optional[float] = None) -> Optional[SweepResult]:
    """One elimination tick. Caller holds ``room.lock``.

    Returns None when the room is no longer active, so a tick that lands
    after the match ended changes nothing.
    """
    if room.status != ACTIVE:
        return None
    now = time.time() if now is None else now
    alive = room.alive_players()
    if len(alive) <= 1:
        room.finish_with_survivor(now)
        return SweepResult(players_remaining=len(alive), finished=True)

    ranked = sorted(alive, key=lambda p: p.progress_percent)
    to_eliminate = elimination_count(len(alive), room.settings.elimination_fraction)
    round_number = len(room.rounds) + 1
    eliminated = []
    for idx, player in enumerate(ranked[:to_eliminate]):
        player.alive = False
        player.eliminated_at_round = round_number
        player.eliminated_at = now
        player.final_rank = len(alive) - idx
        eliminated.append({
            'player_id': player.identity,
            'handle': player.handle,
            'progress_at_elimination': player.progress_percent,
        })
    remaining = len(alive) - to_eliminate
    room.rounds.append(RoundRecord(round_number, now, remaining, eliminated))
    return SweepResult(round_number, eliminated, remaining)


class EliminationScheduler:
    """Owns the countdown and the recurring elimination timer of each room.

    A room's timer is cancelled when the room reports it has finished;
    ticks also re-check the room status, so a late tick is a no-op.
    """

    def __init__(self, store: RoomStore):
        self.store = store
        self._timers: Dict[str, threading.Event] = {}
        self._countdowns: Set[str] = set()
        self._timers_lock = threading.Lock()

    @staticmethod
    def _timers_disabled(app) -> bool:
        return bool(app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'))

    # ---- countdown ----

    def begin_countdown(self, app, code: str) -> bool:
        """Start the countdown of a room once; False if one is already running."""
        if self._timers_disabled(app):
            return False
        with self._timers_lock:
            if code in self._countdowns:
                app.logger.info(f"[countdown-skip] room={code} already counting down")
                return False
            self._countdowns.add(code)
        seconds = int(app.config.get('BR_COUNTDOWN_SEC', 3))
        app.logger.info(f"[countdown-set] room={code} seconds={seconds}")
        socketio.start_background_task(self._countdown_worker, app, code, seconds)
        return True

    def is_counting_down(self, code: str) -> bool:
        with self._timers_lock:
            return code in self._countdowns

    def _countdown_worker(self, app, code: str, seconds: int) -> None:
        try:
            for remaining in range(seconds, -1, -1):
                room = self.store.find(code)
                if room is None or room.status != STARTING:
                    app.logger.info(f"[countdown-abort] room={code}")
                    return
                socketio.emit('countdown', remaining, to=code, namespace=NAMESPACE)
                if remaining:
                    time.sleep(1)
        finally:
            with self._timers_lock:
                self._countdowns.discard(code)
        self.activate(app, code)

    def activate(self, app, code: str) -> bool:
        room = self.store.find(code)
        if room is None:
            return False
        with room.lock:
            if not room.activate():
                app.logger.info(f"[activate-skip] room={code} status={room.status}")
                return False
            room.subscribe(lambda r: self._on_room_finished(app, r))
        app.logger.info(f"[activate] room={code} players={len(room.players)}")
        socketio.emit('game-started', {'room_code': code, 'started_at': room.started_at}, to=code, namespace=NAMESPACE)
        self.schedule(app, code)
        return True

    # ---- elimination timer ----

    def schedule(self, app, code: str) -> None:
        if self._timers_disabled(app):
            return
        room = self.store.find(code)
        if room is None or room.status != ACTIVE:
            return
        with self._timers_lock:
            if code in self._timers:
                app.logger.info(f"[timer-skip] room={code} already scheduled")
                return
            stop = threading.Event()
            self._timers[code] = stop
        interval = room.settings.elimination_interval
        app.logger.info(f"[timer-set] room={code} interval={interval}s")
        socketio.start_background_task(self._worker, app, code, stop, interval)

    def cancel(self, app, code: str) -> None:
        with self._timers_lock:
            stop = self._timers.pop(code, None)
        if stop is not None:
            stop.set()
            app.logger.info(f"[timer-cancel] room={code}")

    def is_scheduled(self, code: str) -> bool:
        with self._timers_lock:
            return code in self._timers

    def _wait(self, app, code: str, stop: threading.Event, interval: int) -> bool:
        """Sleep one interval; True if cancelled meanwhile."""
        hb = int(app.config.get('TIMER_HEARTBEAT_SEC', 0) or 0)
        if hb <= 0:
            return stop.wait(interval)
        waited = 0
        while waited < interval:
            step = min(hb, interval - waited)
            if stop.wait(step):
                return True
            waited += step
            app.logger.info(f"[timer-heartbeat] room={code} remaining={max(0, interval - waited)}s")
        return False

    def _worker(self, app, code: str, stop: threading.Event, interval: int) -> None:
        try:
            while not self._wait(app, code, stop, interval):
                app.logger.info(f"[timer-fire] room={code}")
                result = self.tick(app, code)
                if result is None or result.finished:
                    break
        finally:
            with self._timers_lock:
                if self._timers.get(code) is stop:
                    del self._timers[code]

    def tick(self, app, code: str) -> Optional[SweepResult]:
        room = self.store.find(code)
        if room is None:
            app.logger.info(f"[timer-abort] room={code} gone")
            return None
        with room.lock:
            result = run_elimination_sweep(room)
        if result is None:
            app.logger.info(f"[timer-abort] room={code} status={room.status}")
            return None
        if result.eliminated:
            app.logger.info(
                f"[sweep] room={code} round={result.round_number} eliminated={len(result.eliminated)} remaining={result.players_remaining}"
            )
            socketio.emit('players-eliminated', result.to_dict(), to=code, namespace=NAMESPACE)
        return result

    # ---- room deactivation ----

    def _on_room_finished(self, app, room: Room) -> None:
        self.cancel(app, room.code)
        winner = room.winner.to_dict() if room.winner else None
        app.logger.info(f"[finish] room={room.code} winner={winner['player_id'] if winner else None}")
        socketio.emit('game-finished', {'winner': winner}, to=room.code, namespace=NAMESPACE)
        if room.players:
            archive_match(app, room)
        self.release(app, room)

    def release(self, app, room: Room) -> None:
        """Drop a finished room from the store, after a grace period when timers run."""
        grace = float(app.config.get('BR_FINISHED_ROOM_GRACE_SEC', 30) or 0)
        if grace <= 0 or self._timers_disabled(app):
            self.store.discard(room.code, room)
            return
        app.logger.info(f"[release-set] room={room.code} grace={grace}s")
        socketio.start_background_task(self._release_worker, room, grace)

    def _release_worker(self, room: Room, grace: float) -> None:
        socketio.sleep(grace)
        self.store.discard(room.code, room)
