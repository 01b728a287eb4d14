"""Battle Royale room state machine.

waiting -> starting -> active -> finished, plus waiting -> finished when a
room is abandoned before it starts. Callers hold ``room.lock`` around
every mutating call; the room itself does no locking.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..errors import (
    AlreadyJoined,
    AlreadyStarted,
    CellIsGiven,
    NotEnoughPlayers,
    NotHost,
    PlayerEliminated,
    PlayerNotFound,
    RoomFull,
    RoomNotActive,
)
from ..sudoku.board import Grid
from ..sudoku.evaluator import compute_progress_percent, evaluate_move, validate_move
from ..sudoku.generator import Puzzle

WAITING = 'waiting'
STARTING = 'starting'
ACTIVE = 'active'
FINISHED = 'finished'

PLAYER_CAP = 50


@dataclass
class RoomSettings:
    max_players: int = 20
    min_players: int = 2
    elimination_interval: int = 60
    elimination_fraction: float = 0.25
    difficulty: str = 'hard'

    @classmethod
    def clamped(cls, max_players=20, min_players=2, elimination_interval=60,
                elimination_fraction=0.25, difficulty='hard'):
        min_players = min(max(2, int(min_players)), PLAYER_CAP)
        max_players = min(max(min_players, int(max_players)), PLAYER_CAP)
        try:
            fraction = float(elimination_fraction)
        except (TypeError, ValueError):
            fraction = 0.25
        if not 0 < fraction <= 1:
            fraction = 0.25
        return cls(
            max_players=max_players,
            min_players=min_players,
            elimination_interval=max(1, int(elimination_interval)),
            elimination_fraction=fraction,
            difficulty=difficulty,
        )

    def to_dict(self):
        return {
            'max_players': self.max_players,
            'min_players': self.min_players,
            'elimination_interval': self.elimination_interval,
            'elimination_fraction': self.elimination_fraction,
            'difficulty': self.difficulty,
        }


@dataclass
class PlayerState:
    identity: str
    handle: str
    board: Grid
    joined_at: float
    progress_percent: int = 0
    mistake_count: int = 0
    alive: bool = True
    eliminated_at_round: Optional[int] = None
    eliminated_at: Optional[float] = None
    final_rank: Optional[int] = None

    @property
    def eliminated(self) -> bool:
        return not self.alive

    def to_dict(self):
        return {
            'player_id': self.identity,
            'handle': self.handle,
            'progress_percent': self.progress_percent,
            'mistake_count': self.mistake_count,
            'alive': self.alive,
            'eliminated_at_round': self.eliminated_at_round,
            'final_rank': self.final_rank,
        }


@dataclass
class RoundRecord:
    number: int
    timestamp: float
    players_alive: int
    eliminated: List[dict] = field(default_factory=list)

    def to_dict(self):
        return {
            'number': self.number,
            'timestamp': self.timestamp,
            'players_alive': self.players_alive,
            'players_eliminated': list(self.eliminated),
        }


@dataclass
class Winner:
    identity: str
    handle: str
    elapsed_seconds: int
    mistake_count: int

    def to_dict(self):
        return {
            'player_id': self.identity,
            'handle': self.handle,
            'time': self.elapsed_seconds,
            'mistakes': self.mistake_count,
        }


class Room:
    def __init__(self, code: str, host_identity: str, host_handle: str, puzzle: Puzzle,
                 settings: RoomSettings, now: Optional[float] = None):
        now = time.time() if now is None else now
        self.code = code
        self.status = WAITING
        self.puzzle = puzzle
        self.settings = settings
        self.host_identity = host_identity
        self.players: List[PlayerState] = []
        self.rounds: List[RoundRecord] = []
        self.winner: Optional[Winner] = None
        self.created_at = now
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None
        self.lock = threading.RLock()
        self._listeners: List[Callable[['Room'], None]] = []
        self._append_player(host_identity, host_handle, now)

    # ---- lookups ----

    def find_player(self, identity: str) -> Optional[PlayerState]:
        for p in self.players:
            if p.identity == identity:
                return p
        return None

    def alive_players(self) -> List[PlayerState]:
        return [p for p in self.players if p.alive]

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.settings.max_players

    # ---- lifecycle listeners ----

    def subscribe(self, listener: Callable[['Room'], None]) -> None:
        """Call ``listener(room)`` once when the room leaves play."""
        self._listeners.append(listener)

    def _finish(self, now: float) -> None:
        if self.status == FINISHED:
            return
        self.status = FINISHED
        self.finished_at = now
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self)

    # ---- roster ----

    def _append_player(self, identity: str, handle: str, now: float) -> PlayerState:
        player = PlayerState(
            identity=identity,
            handle=handle or identity,
            board=self.puzzle.givens_copy(),
            joined_at=now,
        )
        self.players.append(player)
        return player

    def join(self, identity: str, handle: str, now: Optional[float] = None) -> PlayerState:
        if self.status != WAITING:
            raise AlreadyStarted()
        if self.is_full:
            raise RoomFull()
        if self.find_player(identity):
            raise AlreadyJoined()
        return self._append_player(identity, handle, time.time() if now is None else now)

    def leave(self, identity: str, now: Optional[float] = None) -> PlayerState:
        """Remove a player; returns it. The caller destroys the room when empty."""
        player = self.find_player(identity)
        if not player:
            raise PlayerNotFound()
        self.players.remove(player)
        if self.host_identity == identity and self.players:
            self.host_identity = self.players[0].identity
        if not self.players:
            self._finish(time.time() if now is None else now)
        return player

    # ---- transitions ----

    def start(self, requester: str, now: Optional[float] = None) -> None:
        if requester != self.host_identity:
            raise NotHost()
        if self.status != WAITING:
            raise AlreadyStarted()
        if len(self.players) < self.settings.min_players:
            raise NotEnoughPlayers(f'At least {self.settings.min_players} players are required to start')
        self.status = STARTING
        self.started_at = time.time() if now is None else now

    def activate(self, now: Optional[float] = None) -> bool:
        """Countdown over: starting -> active. No-op in any other state."""
        if self.status != STARTING:
            return False
        self.status = ACTIVE
        # The clock for elapsed times runs from the end of the countdown.
        self.started_at = time.time() if now is None else now
        return True

    def apply_move(self, identity: str, row: int, col: int, value: int, now: Optional[float] = None) -> dict:
        validate_move(row, col, value)
        if self.status != ACTIVE:
            raise RoomNotActive()
        player = self.find_player(identity)
        if not player:
            raise PlayerNotFound()
        if not player.alive:
            raise PlayerEliminated()
        if self.puzzle.givens[row][col] != 0:
            raise CellIsGiven()

        player.board[row][col] = value
        evaluation = evaluate_move(player.board, self.puzzle.solution, row, col, value)
        if not evaluation.is_correct and value != 0:
            player.mistake_count += 1
        player.progress_percent = compute_progress_percent(
            player.board, self.puzzle.solution, self.puzzle.givens
        )

        completed = player.progress_percent == 100
        if completed and self.winner is None:
            self._declare_winner(player, time.time() if now is None else now)

        return {
            'is_correct': evaluation.is_correct,
            'completed': completed,
            'progress_percent': player.progress_percent,
            'mistake_count': player.mistake_count,
            'board': [list(r) for r in player.board],
        }

    def _declare_winner(self, player: PlayerState, now: float) -> None:
        self.winner = Winner(
            identity=player.identity,
            handle=player.handle,
            elapsed_seconds=int(now - (self.started_at or now)),
            mistake_count=player.mistake_count,
        )
        player.final_rank = 1
        # Unranked runners-up are ordered by progress; sorted() keeps join
        # order among equal progress.
        unranked = [p for p in self.players if p is not player and p.final_rank is None]
        for rank, p in enumerate(sorted(unranked, key=lambda p: -p.progress_percent), start=2):
            p.final_rank = rank
        self._finish(now)

    def finish_with_survivor(self, now: Optional[float] = None) -> Optional[PlayerState]:
        """End the match once at most one player is alive."""
        now = time.time() if now is None else now
        alive = self.alive_players()
        survivor = alive[0] if len(alive) == 1 else None
        if survivor is not None and self.winner is None:
            self._declare_winner(survivor, now)
        else:
            self._finish(now)
        return survivor

    # ---- views ----

    def snapshot(self, viewer: Optional[str] = None) -> dict:
        data = {
            'room_code': self.code,
            'status': self.status,
            'difficulty': self.puzzle.difficulty,
            'puzzle': self.puzzle.givens_copy(),
            'players': [p.to_dict() for p in self.players],
            'players_alive': len(self.alive_players()),
            'rounds': [r.to_dict() for r in self.rounds],
            'winner': self.winner.to_dict() if self.winner else None,
            'settings': self.settings.to_dict(),
            'host_id': self.host_identity,
            'started_at': self.started_at,
            'finished_at': self.finished_at,
        }
        if viewer is not None:
            me = self.find_player(viewer)
            data['is_host'] = viewer == self.host_identity
            data['my_board'] = [list(r) for r in me.board] if me else None
        return data

    def leaderboard(self) -> List[dict]:
        ranked = sorted(self.alive_players(), key=lambda p: -p.progress_percent)
        return [
            {'handle': p.handle, 'progress_percent': p.progress_percent, 'mistake_count': p.mistake_count}
            for p in ranked
        ]
