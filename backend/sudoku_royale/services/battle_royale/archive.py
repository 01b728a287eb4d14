import json

from sqlalchemy.exc import SQLAlchemyError

from sudoku_royale import db
from sudoku_royale.models import MatchRecord


def _player_summary(player):
    return {
        'player_id': player.identity,
        'handle': player.handle,
        'progress': player.progress_percent,
        'mistakes': player.mistake_count,
        'final_rank': player.final_rank,
        'eliminated_at_round': player.eliminated_at_round,
    }


def archive_match(app, room):
    """Persist a finished room as a MatchRecord. Returns the record or None."""
    winner = room.winner
    record = MatchRecord(
        room_code=room.code,
        difficulty=room.puzzle.difficulty,
        seed=room.puzzle.seed,
        winner_id=winner.identity if winner else None,
        winner_handle=winner.handle if winner else None,
        winner_time=winner.elapsed_seconds if winner else None,
        winner_mistakes=winner.mistake_count if winner else None,
        players=json.dumps([_player_summary(p) for p in room.players]),
        rounds=json.dumps([r.to_dict() for r in room.rounds]),
        started_at=room.started_at,
        finished_at=room.finished_at,
    )
    with app.app_context():
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception(f"[archive-failed] room={room.code}")
            return None
        app.logger.info(f"[archive] room={room.code} record={record.id}")
        return record
