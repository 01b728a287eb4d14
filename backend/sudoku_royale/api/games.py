from flask import Blueprint, jsonify, request, current_app
from sudoku_royale import db
from sudoku_royale.api import int_field, json_body
from sudoku_royale.models import Game
from sudoku_royale.services import solo
from sudoku_royale.services.errors import GameNotFound

games = Blueprint('games', __name__)


def _get_game(game_id: int) -> Game:
    game = db.session.get(Game, game_id)
    if game is None:
        raise GameNotFound()
    return game


@games.route('/new', methods=['POST'])
def new_game():
    """
    Starts a single-player game: normal, timeAttack or expert.
    """
    data = json_body()
    player_name = data.get('player_name')
    if not player_name:
        return jsonify({'error': 'Player name is required'}), 400
    mode = data.get('mode') or 'normal'
    if mode not in ('normal', 'timeAttack', 'expert'):
        return jsonify({'error': f"Mode '{mode}' cannot be started here"}), 400

    time_limit = None
    if mode == 'timeAttack':
        time_limit = int(current_app.config.get('TIME_ATTACK_LIMIT_SEC', 600))
    game = solo.new_game(
        player_name,
        data.get('difficulty') or 'medium',
        mode=mode,
        seed=int_field(data, 'seed'),
        time_limit=time_limit,
    )
    current_app.logger.info(f"[game-new] game={game.id} player={player_name} mode={mode} difficulty={game.difficulty}")
    return jsonify(game.to_dict()), 201


@games.route('/<int:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify(_get_game(game_id).to_dict())


@games.route('/<int:game_id>/move', methods=['POST'])
def make_move(game_id):
    data = json_body()
    game = _get_game(game_id)
    result = solo.apply_move(game, int_field(data, 'row'), int_field(data, 'col'), int_field(data, 'value'))
    if result['completed']:
        current_app.logger.info(f"[game-complete] game={game.id} time={game.time}s mistakes={game.mistakes}")
    return jsonify(result)


@games.route('/<int:game_id>/hint', methods=['POST'])
def use_hint(game_id):
    """
    Reveals the solution value of the selected cell.
    """
    data = json_body()
    game = _get_game(game_id)
    return jsonify(solo.use_hint(game, int_field(data, 'row'), int_field(data, 'col')))


@games.route('/history', methods=['GET'])
def history():
    player_name = request.args.get('player_name')
    if not player_name:
        return jsonify({'error': 'Player name is required'}), 400
    limit = request.args.get('limit', 20, type=int)
    rows = (
        Game.query.filter_by(player_name=player_name)
        .order_by(Game.created_at.desc())
        .limit(limit)
        .all()
    )
    return jsonify({'games': [g.to_dict() for g in rows]})
