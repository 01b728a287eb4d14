from flask import Blueprint, jsonify, request, current_app
from sudoku_royale.api import json_body
from sudoku_royale.services import solo
from sudoku_royale.services.errors import LevelLocked, LevelNotFound
from sudoku_royale.services.sudoku import tournament as catalog

tournament = Blueprint('tournament', __name__)


@tournament.route('/chapters', methods=['GET'])
def chapters():
    player_name = request.args.get('player_name')
    completed = solo.completed_levels(player_name) if player_name else {}
    return jsonify({
        'chapters': catalog.progress_view(completed),
        'total_score': catalog.total_score(completed),
    })


@tournament.route('/levels/<string:level_id>/start', methods=['POST'])
def start_level(level_id):
    """
    Starts a tournament level. Every player gets the same puzzle per level.
    """
    data = json_body()
    player_name = data.get('player_name')
    if not player_name:
        return jsonify({'error': 'Player name is required'}), 400
    level = catalog.get_level(level_id)
    if level is None:
        raise LevelNotFound()
    if not catalog.is_unlocked(level, solo.completed_levels(player_name)):
        raise LevelLocked()

    game = solo.new_game(
        player_name,
        level.difficulty,
        mode='tournament',
        seed=level.seed,
        time_limit=level.time_limit,
        tournament_level=level.key,
    )
    current_app.logger.info(f"[tournament-start] game={game.id} player={player_name} level={level.key}")
    payload = game.to_dict()
    payload['level'] = level.to_dict()
    payload['hints_allowed'] = solo.hints_allowed(game)
    return jsonify(payload), 201
