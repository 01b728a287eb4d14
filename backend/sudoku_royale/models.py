from sudoku_royale import db
import json
from time import time as timestamp


def _loads(value, default=None):
    if not value:
        return default
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return default


class Game(db.Model):
    """One single-player session (normal, timeAttack, expert, daily or tournament)."""
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(64), nullable=False, index=True)
    difficulty = db.Column(db.String(16), nullable=False)
    mode = db.Column(db.String(16), nullable=False, default='normal')  # normal, timeAttack, expert, daily, tournament
    seed = db.Column(db.BigInteger, nullable=False)
    # Grids are JSON-encoded 9x9 lists
    puzzle = db.Column(db.Text, nullable=False)
    solution = db.Column(db.Text, nullable=False)
    user_board = db.Column(db.Text, nullable=False)
    move_history = db.Column(db.Text, nullable=True)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    failed = db.Column(db.Boolean, default=False, nullable=False)
    time = db.Column(db.Integer, nullable=True)  # seconds, set on completion
    mistakes = db.Column(db.Integer, default=0, nullable=False)
    hints_used = db.Column(db.Integer, default=0, nullable=False)
    time_limit = db.Column(db.Integer, nullable=True)
    daily_challenge_date = db.Column(db.String(10), nullable=True, index=True)  # "2025-11-02"
    tournament_level = db.Column(db.String(16), nullable=True)
    created_at = db.Column(db.Float, nullable=False, default=timestamp)
    completed_at = db.Column(db.Float, nullable=True)

    @property
    def givens(self):
        return _loads(self.puzzle, [])

    @property
    def solution_grid(self):
        return _loads(self.solution, [])

    @property
    def board(self):
        return _loads(self.user_board, [])

    @board.setter
    def board(self, grid):
        self.user_board = json.dumps(grid)

    @property
    def history(self):
        return _loads(self.move_history, [])

    @property
    def is_over(self):
        return bool(self.completed or self.failed)

    def to_dict(self):
        data = {
            'id': self.id,
            'player_name': self.player_name,
            'difficulty': self.difficulty,
            'mode': self.mode,
            'seed': self.seed,
            'puzzle': self.givens,
            'user_board': self.board,
            'completed': self.completed,
            'failed': self.failed,
            'time': self.time,
            'mistakes': self.mistakes,
            'hints_used': self.hints_used,
            'time_limit': self.time_limit,
            'daily_challenge_date': self.daily_challenge_date,
            'tournament_level': self.tournament_level,
            'created_at': self.created_at,
            'completed_at': self.completed_at,
        }
        # Never hand out the answer while the game is still playable
        if self.is_over:
            data['solution'] = self.solution_grid
        return data


class TournamentResult(db.Model):
    __tablename__ = 'tournament_result'
    __table_args__ = (db.UniqueConstraint('player_name', 'level_key', name='uq_tournament_player_level'),)
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(64), nullable=False, index=True)
    level_key = db.Column(db.String(16), nullable=False)
    stars = db.Column(db.Integer, default=0, nullable=False)
    time = db.Column(db.Integer, nullable=False)
    mistakes = db.Column(db.Integer, default=0, nullable=False)
    completed_at = db.Column(db.Float, nullable=False, default=timestamp)

    def to_dict(self):
        return {
            'level_id': self.level_key,
            'stars': self.stars,
            'time': self.time,
            'mistakes': self.mistakes,
            'completed_at': self.completed_at,
        }


class MatchRecord(db.Model):
    """Archived Battle Royale match, written once the room finishes."""
    __tablename__ = 'match_record'
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(12), nullable=False, index=True)
    difficulty = db.Column(db.String(16), nullable=False)
    seed = db.Column(db.BigInteger, nullable=False)
    winner_id = db.Column(db.String(64), nullable=True)
    winner_handle = db.Column(db.String(64), nullable=True)
    winner_time = db.Column(db.Integer, nullable=True)
    winner_mistakes = db.Column(db.Integer, nullable=True)
    players = db.Column(db.Text, nullable=False)  # JSON list of player summaries
    rounds = db.Column(db.Text, nullable=True)  # JSON list of round records
    started_at = db.Column(db.Float, nullable=True)
    finished_at = db.Column(db.Float, nullable=True)

    @property
    def player_summaries(self):
        return _loads(self.players, [])

    def summary_for(self, player_id):
        for p in self.player_summaries:
            if p.get('player_id') == player_id:
                return p
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'room_code': self.room_code,
            'difficulty': self.difficulty,
            'seed': self.seed,
            'winner': {
                'player_id': self.winner_id,
                'handle': self.winner_handle,
                'time': self.winner_time,
                'mistakes': self.winner_mistakes,
            } if self.winner_id else None,
            'players': self.player_summaries,
            'rounds': _loads(self.rounds, []),
            'started_at': self.started_at,
            'finished_at': self.finished_at,
        }
