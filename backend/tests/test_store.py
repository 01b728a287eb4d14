import itertools

import pytest

from sudoku_royale.services.battle_royale.room import FINISHED, STARTING, RoomSettings
from sudoku_royale.services.battle_royale.store import RoomStore, generate_room_code
from sudoku_royale.services.errors import RoomCodeExhausted, RoomNotFound


def test_room_code_shape():
    code = generate_room_code(6)
    assert len(code) == 6
    assert code.isalnum() and code == code.upper()


def test_collision_on_first_attempt_retries(easy_puzzle, settings):
    codes = iter(['AAAAAA', 'AAAAAA', 'BBBBBB'])
    store = RoomStore(code_factory=lambda: next(codes))

    first = store.create('h1', 'H1', settings, puzzle=easy_puzzle)
    second = store.create('h2', 'H2', settings, puzzle=easy_puzzle)

    assert first.code == 'AAAAAA'
    assert second.code == 'BBBBBB'
    assert store.get('AAAAAA') is first
    assert store.get('bbbbbb') is second


def test_code_exhaustion_raises(easy_puzzle, settings):
    store = RoomStore(code_factory=itertools.repeat('SAME01').__next__, max_attempts=3)
    store.create('h1', 'H1', settings, puzzle=easy_puzzle)
    with pytest.raises(RoomCodeExhausted):
        store.create('h2', 'H2', settings, puzzle=easy_puzzle)
    assert len(store.open_rooms()) == 1


def test_create_generates_puzzle_for_difficulty(settings):
    store = RoomStore()
    room = store.create('h1', 'H1', settings)
    assert room.puzzle.difficulty == 'easy'
    assert room.host_identity == 'h1'


def test_unknown_room(settings):
    store = RoomStore()
    with pytest.raises(RoomNotFound):
        store.get('NOPE00')
    with pytest.raises(RoomNotFound):
        store.join('NOPE00', 'p', 'P')
    assert store.find('NOPE00') is None


def test_leave_last_player_destroys_room(easy_puzzle, settings):
    store = RoomStore()
    room = store.create('h1', 'H1', settings, puzzle=easy_puzzle)
    store.join(room.code, 'p2', 'P2')

    _, destroyed = store.leave(room.code, 'h1')
    assert not destroyed
    assert room.host_identity == 'p2'

    _, destroyed = store.leave(room.code, 'p2')
    assert destroyed
    assert room.status == FINISHED
    assert store.find(room.code) is None


def test_open_rooms_excludes_caller_and_started(easy_puzzle, settings):
    store = RoomStore()
    mine = store.create('me', 'Me', settings, puzzle=easy_puzzle, now=1.0)
    other = store.create('host', 'Host', settings, puzzle=easy_puzzle, now=2.0)
    started = store.create('host2', 'Host2', settings, puzzle=easy_puzzle, now=3.0)
    store.join(started.code, 'p2', 'P2')
    store.start(started.code, 'host2')
    assert started.status == STARTING

    listed = store.open_rooms(exclude_identity='me')
    assert [r.code for r in listed] == [started.code, other.code]
    assert mine not in listed

    started.status = FINISHED
    assert [r.code for r in store.open_rooms()] == [other.code, mine.code]


def test_configure_ignores_empty_values():
    store = RoomStore()
    store.configure(code_length=None, max_attempts=4)
    assert store.code_length == 6
    assert store.max_attempts == 4


def test_move_returns_leaderboard_taken_with_the_move(easy_puzzle, settings, open_cells):
    store = RoomStore()
    room = store.create('h1', 'H1', settings, puzzle=easy_puzzle)
    store.join(room.code, 'p2', 'P2')
    store.start(room.code, 'h1')
    room.activate()

    r, c = open_cells[0]
    same, result, board = store.apply_move(room.code, 'p2', r, c, easy_puzzle.solution[r][c])

    assert same is room
    assert result['is_correct']
    assert [e['handle'] for e in board] == ['P2', 'H1']
    assert board[0]['progress_percent'] == result['progress_percent'] > 0


def test_discard_skips_a_newer_room_under_the_same_code(easy_puzzle, settings):
    codes = iter(['SAME01', 'SAME01'])
    store = RoomStore(code_factory=lambda: next(codes))
    old = store.create('h1', 'H1', settings, puzzle=easy_puzzle)
    store.discard(old.code)
    new = store.create('h2', 'H2', settings, puzzle=easy_puzzle)

    store.discard('same01', old)
    assert store.find('SAME01') is new
    store.discard('same01', new)
    assert store.find('SAME01') is None
