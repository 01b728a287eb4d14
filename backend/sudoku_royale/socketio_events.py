from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from sudoku_royale.services.battle_royale import STARTING, rooms, scheduler
from sudoku_royale.services.battle_royale.scheduler import NAMESPACE
from typing import Any, Dict


_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[ws-connect] sid={_get_sid()}")
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_disconnect(*args):
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    current_app.logger.info(f"[ws-disconnect] sid={_get_sid()} room={ctx.get('room_code') if ctx else None}")


def handle_join_room(data):
    room_code = ((data or {}).get('room_code') or '').upper()
    player_id = (data or {}).get('player_id')
    if not room_code:
        emit('error', {'message': 'room_code is required'})
        return
    room = rooms.find(room_code)
    if room is None:
        emit('error', {'message': 'Room not found'})
        return
    join_room(room_code)
    _sid_to_ctx[_get_sid()] = {'room_code': room_code, 'player_id': player_id}
    with room.lock:
        player = room.find_player(str(player_id)) if player_id is not None else None
        state = {
            'status': room.status,
            'players': [
                {'handle': p.handle, 'progress_percent': p.progress_percent, 'alive': p.alive}
                for p in room.players
            ],
        }
        total = len(room.players)
    emit('player-joined', {'handle': player.handle if player else None, 'total_players': total}, to=room_code)
    emit('room-state', state)


def handle_leave_room(data):
    room_code = ((data or {}).get('room_code') or '').upper()
    if not room_code:
        emit('error', {'message': 'room_code is required'})
        return
    leave_room(room_code)
    _sid_to_ctx.pop(_get_sid(), None)
    emit('left', {'room_code': room_code})


def handle_start_countdown(data):
    room_code = ((data or {}).get('room_code') or '').upper()
    room = rooms.find(room_code)
    if room is None or room.status != STARTING:
        emit('error', {'message': 'Room is not starting'})
        return
    scheduler.begin_countdown(current_app._get_current_object(), room_code)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on the Battle Royale namespace. When testing is True,
    also mirror handlers on the default namespace '/' to accommodate the
    test harness.
    """
    from sudoku_royale import socketio

    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'join-room': handle_join_room,
        'leave-room': handle_leave_room,
        'start-countdown': handle_start_countdown,
        'ping': handle_ping,
    }
    for event, handler in handlers.items():
        socketio.on_event(event, handler, namespace=NAMESPACE)
    if testing:
        # Test-only mirror on default namespace
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace='/')
