from flask import Blueprint, jsonify, request, current_app
from sudoku_royale import socketio
from sudoku_royale.api import int_field, json_body
from sudoku_royale.models import MatchRecord
from sudoku_royale.services.battle_royale import RoomSettings, rooms, scheduler
from sudoku_royale.services.battle_royale.scheduler import NAMESPACE
from sudoku_royale.services.errors import PlayerNotFound

battle_royale = Blueprint('battle_royale', __name__)


def _player_id(data):
    player_id = data.get('player_id')
    return str(player_id) if player_id not in (None, '') else None


@battle_royale.route('/create', methods=['POST'])
def create_room():
    """
    Creates a room with a fresh puzzle; the creator becomes host and first player.
    """
    data = json_body()
    player_id = _player_id(data)
    if not player_id:
        return jsonify({'error': 'Player ID is required'}), 400
    cfg = current_app.config
    settings = RoomSettings.clamped(
        max_players=int_field(data, 'max_players') or cfg.get('BR_MAX_PLAYERS', 20),
        min_players=int_field(data, 'min_players') or cfg.get('BR_MIN_PLAYERS', 2),
        elimination_interval=int_field(data, 'elimination_interval') or cfg.get('BR_ELIMINATION_INTERVAL_SEC', 60),
        elimination_fraction=data.get('elimination_fraction') or cfg.get('BR_ELIMINATION_FRACTION', 0.25),
        difficulty=data.get('difficulty') or cfg.get('BR_DIFFICULTY', 'hard'),
    )
    room = rooms.create(player_id, data.get('name') or player_id, settings)
    return jsonify({
        'success': True,
        'room_code': room.code,
        'players': len(room.players),
        'max_players': room.settings.max_players,
    }), 201


@battle_royale.route('/rooms', methods=['GET'])
def list_rooms():
    player_id = request.args.get('player_id')
    return jsonify({'rooms': [
        {
            'room_code': r.code,
            'status': r.status,
            'players': len(r.players),
            'max_players': r.settings.max_players,
            'is_full': r.is_full,
            'difficulty': r.puzzle.difficulty,
            'created_at': r.created_at,
        }
        for r in rooms.open_rooms(exclude_identity=player_id)
    ]})


@battle_royale.route('/join/<string:room_code>', methods=['POST'])
def join_room(room_code):
    data = json_body()
    player_id = _player_id(data)
    if not player_id:
        return jsonify({'error': 'Player ID is required'}), 400
    room, player = rooms.join(room_code, player_id, data.get('name') or player_id)
    socketio.emit('player-joined', {'handle': player.handle, 'total_players': len(room.players)},
                  to=room.code, namespace=NAMESPACE)
    return jsonify({
        'success': True,
        'room_code': room.code,
        'players': len(room.players),
        'max_players': room.settings.max_players,
    })


@battle_royale.route('/history', methods=['GET'])
def history():
    """
    Finished matches the player took part in, newest first.
    """
    player_id = request.args.get('player_id')
    if not player_id:
        return jsonify({'error': 'Player ID is required'}), 400
    limit = request.args.get('limit', 20, type=int)
    entries = []
    for record in MatchRecord.query.order_by(MatchRecord.finished_at.desc()).limit(500):
        mine = record.summary_for(player_id)
        if not mine:
            continue
        entries.append({
            'room_code': record.room_code,
            'position': mine.get('final_rank'),
            'won': record.winner_id == player_id,
            'total_players': len(record.player_summaries),
            'progress': mine.get('progress'),
            'mistakes': mine.get('mistakes'),
            'date': record.finished_at,
        })
        if len(entries) >= limit:
            break
    return jsonify({'history': entries})


@battle_royale.route('/<string:room_code>', methods=['GET'])
def get_room(room_code):
    player_id = request.args.get('player_id')
    room = rooms.get(room_code)
    with room.lock:
        if not player_id or room.find_player(player_id) is None:
            raise PlayerNotFound()
        return jsonify(room.snapshot(viewer=player_id))


@battle_royale.route('/<string:room_code>/start', methods=['POST'])
def start_room(room_code):
    """
    Host only. Moves the room to 'starting'; the countdown then activates it.
    """
    data = json_body()
    room = rooms.start(room_code, _player_id(data))
    current_app.logger.info(f"[room-start] room={room.code} players={len(room.players)}")
    socketio.emit('room-starting', {'room_code': room.code}, to=room.code, namespace=NAMESPACE)
    scheduler.begin_countdown(current_app._get_current_object(), room.code)
    return jsonify({'success': True, 'status': room.status})


@battle_royale.route('/<string:room_code>/move', methods=['POST'])
def make_move(room_code):
    data = json_body()
    room, result, board = rooms.apply_move(
        room_code, _player_id(data),
        int_field(data, 'row'), int_field(data, 'col'), int_field(data, 'value'),
    )
    socketio.emit('leaderboard-update', {'players': board}, to=room.code, namespace=NAMESPACE)
    result['success'] = True
    return jsonify(result)


@battle_royale.route('/<string:room_code>/leave', methods=['POST'])
def leave_room(room_code):
    data = json_body()
    room, destroyed = rooms.leave(room_code, _player_id(data))
    if not destroyed:
        socketio.emit('player-left', {'total_players': len(room.players), 'host_id': room.host_identity},
                      to=room.code, namespace=NAMESPACE)
    return jsonify({'success': True, 'room_deleted': destroyed})
