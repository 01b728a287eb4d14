from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import and_, func, or_
from sudoku_royale import db
from sudoku_royale.api import json_body
from sudoku_royale.models import Game
from sudoku_royale.services import solo
from sudoku_royale.services.sudoku.daily import daily_puzzle, parse_date, seed_for_date, today

daily = Blueprint('daily', __name__)


def _target_date():
    raw = request.args.get('date')
    try:
        return parse_date(raw).isoformat() if raw else today().isoformat()
    except ValueError:
        return None


def _difficulty():
    return current_app.config.get('DAILY_DIFFICULTY', 'hard')


@daily.route('/today', methods=['GET'])
def get_today():
    """
    Today's puzzle: identical for every player, derived from the date.
    """
    date = today().isoformat()
    puzzle = daily_puzzle(date, _difficulty())
    completed = Game.query.filter_by(daily_challenge_date=date, completed=True)
    avg_time, avg_mistakes = (
        db.session.query(func.avg(Game.time), func.avg(Game.mistakes))
        .filter(Game.daily_challenge_date == date, Game.completed.is_(True))
        .one()
    )
    return jsonify({
        'date': date,
        'seed': puzzle.seed,
        'puzzle': puzzle.givens_copy(),
        'clues': puzzle.clue_count,
        'difficulty': puzzle.difficulty,
        'stats': {
            'total_players': completed.count(),
            'avg_time': round(avg_time) if avg_time is not None else None,
            'avg_mistakes': round(avg_mistakes) if avg_mistakes is not None else None,
        },
    })


@daily.route('/start', methods=['POST'])
def start():
    data = json_body()
    player_name = data.get('player_name')
    if not player_name:
        return jsonify({'error': 'Player name is required'}), 400
    date = today().isoformat()

    existing = Game.query.filter_by(player_name=player_name, daily_challenge_date=date, mode='daily').all()
    if any(g.completed for g in existing):
        return jsonify({'error': "You already completed today's challenge", 'completed': True}), 400
    in_progress = next((g for g in existing if not g.is_over), None)
    if in_progress:
        payload = in_progress.to_dict()
        payload['resumed'] = True
        return jsonify(payload)

    game = solo.new_game(
        player_name,
        _difficulty(),
        mode='daily',
        seed=seed_for_date(date),
        daily_challenge_date=date,
    )
    current_app.logger.info(f"[daily-start] game={game.id} player={player_name} date={date}")
    payload = game.to_dict()
    payload['resumed'] = False
    return jsonify(payload), 201


def _completed_query(date):
    return Game.query.filter_by(daily_challenge_date=date, mode='daily', completed=True)


@daily.route('/leaderboard', methods=['GET'])
def leaderboard():
    """
    Completed runs for a date ordered by time, then mistakes, then hints.
    """
    date = _target_date()
    if date is None:
        return jsonify({'error': 'Date must be YYYY-MM-DD'}), 400
    limit = request.args.get('limit', 100, type=int)
    top = (
        _completed_query(date)
        .order_by(Game.time.asc(), Game.mistakes.asc(), Game.hints_used.asc())
        .limit(limit)
        .all()
    )
    total = Game.query.filter_by(daily_challenge_date=date, mode='daily').count()
    completed = _completed_query(date).count()
    return jsonify({
        'date': date,
        'leaderboard': [
            {
                'position': idx + 1,
                'player_name': g.player_name,
                'time': g.time,
                'mistakes': g.mistakes,
                'hints_used': g.hints_used,
                'completed_at': g.completed_at,
            }
            for idx, g in enumerate(top)
        ],
        'stats': {
            'total_participants': total,
            'completed_participants': completed,
            'completion_rate': round(completed * 100 / total) if total else 0,
        },
    })


@daily.route('/my-rank', methods=['GET'])
def my_rank():
    player_name = request.args.get('player_name')
    if not player_name:
        return jsonify({'error': 'Player name is required'}), 400
    date = _target_date()
    if date is None:
        return jsonify({'error': 'Date must be YYYY-MM-DD'}), 400
    mine = _completed_query(date).filter_by(player_name=player_name).order_by(Game.time.asc()).first()
    if not mine:
        return jsonify({'participated': False, 'message': "You have not completed this day's challenge"})

    better = _completed_query(date).filter(or_(
        Game.time < mine.time,
        and_(Game.time == mine.time, Game.mistakes < mine.mistakes),
        and_(Game.time == mine.time, Game.mistakes == mine.mistakes, Game.hints_used < mine.hints_used),
    )).count()
    rank = better + 1
    total = _completed_query(date).count()
    return jsonify({
        'participated': True,
        'rank': rank,
        'total_participants': total,
        'percentile': round((total - rank + 1) * 100 / total) if total else 100,
        'time': mine.time,
        'mistakes': mine.mistakes,
        'hints_used': mine.hints_used,
        'completed_at': mine.completed_at,
    })
