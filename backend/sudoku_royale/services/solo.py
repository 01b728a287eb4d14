"""Single-player sessions: normal, time attack, expert, daily and tournament games."""

import json
import time

from sudoku_royale import db
from sudoku_royale.models import Game, TournamentResult
from .errors import CellIsGiven, GameAlreadyCompleted, GameError, HintsDisabled, TimeLimitExceeded
from .sudoku import tournament
from .sudoku.evaluator import compute_progress_percent, evaluate_move, validate_move
from .sudoku.generator import cached_puzzle, time_seed, validate_difficulty

MODES = ('normal', 'timeAttack', 'expert', 'daily', 'tournament')


def new_game(player_name, difficulty, mode='normal', seed=None, time_limit=None,
             daily_challenge_date=None, tournament_level=None) -> Game:
    validate_difficulty(difficulty)
    if mode not in MODES:
        raise GameError(f"Unknown mode '{mode}'")
    if seed is None:
        seed = time_seed()
    puzzle = cached_puzzle(difficulty, int(seed))
    game = Game(
        player_name=player_name,
        difficulty=difficulty,
        mode=mode,
        seed=puzzle.seed,
        puzzle=json.dumps(puzzle.givens_copy()),
        solution=json.dumps(puzzle.to_dict(include_solution=True)['solution']),
        user_board=json.dumps(puzzle.givens_copy()),
        move_history=json.dumps([]),
        time_limit=time_limit,
        daily_challenge_date=daily_challenge_date,
        tournament_level=tournament_level,
        created_at=time.time(),
    )
    db.session.add(game)
    db.session.commit()
    return game


def _ensure_playable(game: Game, now: float) -> None:
    if game.is_over:
        raise GameAlreadyCompleted()
    if game.time_limit and now - game.created_at > game.time_limit:
        game.failed = True
        db.session.add(game)
        db.session.commit()
        raise TimeLimitExceeded()


def _result(game: Game, board, is_correct: bool) -> dict:
    progress = compute_progress_percent(board, game.solution_grid, game.givens)
    data = {
        'is_correct': is_correct,
        'completed': game.completed,
        'progress': progress,
        'mistakes': game.mistakes,
        'hints_used': game.hints_used,
        'user_board': board,
    }
    if game.completed:
        data['time'] = game.time
    if game.completed and game.mode == 'tournament':
        level = tournament.get_level(game.tournament_level)
        data['level_passed'] = tournament.level_passed(level, game.time, game.mistakes)
        data['stars'] = tournament.stars_for(level, game.time, game.mistakes) if data['level_passed'] else 0
    return data


def _complete_if_solved(game: Game, board, now: float) -> None:
    if compute_progress_percent(board, game.solution_grid, game.givens) != 100:
        return
    game.completed = True
    game.completed_at = now
    game.time = int(now - game.created_at)
    if game.mode == 'tournament':
        record_tournament_result(game)


def apply_move(game: Game, row, col, value, now=None) -> dict:
    validate_move(row, col, value)
    now = time.time() if now is None else now
    _ensure_playable(game, now)
    if game.givens[row][col] != 0:
        raise CellIsGiven()

    board = game.board
    old_value = board[row][col]
    board[row][col] = value
    evaluation = evaluate_move(board, game.solution_grid, row, col, value)
    if not evaluation.is_correct and value != 0:
        game.mistakes += 1

    history = game.history
    history.append({'row': row, 'col': col, 'old_value': old_value, 'new_value': value, 'timestamp': now})
    game.move_history = json.dumps(history)
    game.board = board
    _complete_if_solved(game, board, now)
    db.session.add(game)
    db.session.commit()
    return _result(game, board, evaluation.is_correct)


def hints_allowed(game: Game) -> bool:
    if game.mode == 'expert':
        return False
    if game.mode == 'tournament':
        level = tournament.get_level(game.tournament_level)
        return not (level and level.is_boss)
    return True


def use_hint(game: Game, row, col, now=None) -> dict:
    """Reveal the solution value of one cell."""
    validate_move(row, col, 0)
    now = time.time() if now is None else now
    if not hints_allowed(game):
        raise HintsDisabled()
    _ensure_playable(game, now)
    if game.givens[row][col] != 0:
        raise CellIsGiven()

    board = game.board
    board[row][col] = game.solution_grid[row][col]
    game.hints_used += 1
    game.board = board
    _complete_if_solved(game, board, now)
    db.session.add(game)
    db.session.commit()
    return _result(game, board, True)


def completed_levels(player_name: str) -> dict:
    rows = TournamentResult.query.filter_by(player_name=player_name).all()
    return {r.level_key: r.stars for r in rows}


def record_tournament_result(game: Game):
    """Keep the player's best passing run per level. Caller commits."""
    level = tournament.get_level(game.tournament_level)
    if level is None or not tournament.level_passed(level, game.time, game.mistakes):
        return None
    stars = tournament.stars_for(level, game.time, game.mistakes)
    existing = TournamentResult.query.filter_by(player_name=game.player_name, level_key=level.key).first()
    if existing is None:
        existing = TournamentResult(
            player_name=game.player_name, level_key=level.key,
            stars=stars, time=game.time, mistakes=game.mistakes, completed_at=game.completed_at,
        )
    elif stars > existing.stars or (stars == existing.stars and game.time < existing.time):
        existing.stars = stars
        existing.time = game.time
        existing.mistakes = game.mistakes
        existing.completed_at = game.completed_at
    db.session.add(existing)
    return existing
