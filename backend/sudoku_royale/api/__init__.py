from flask import jsonify, request

from sudoku_royale.services.errors import GameError


def register_error_handlers(flask_app):
    @flask_app.errorhandler(GameError)
    def handle_game_error(err):
        return jsonify(err.to_dict()), err.status_code


def json_body():
    return request.get_json(silent=True) or {}


def int_field(data, name):
    """Coerce a JSON field to int; None when missing or not a number."""
    value = data.get(name)
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
