import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///sudoku_royale.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Battle Royale timers (seconds)
    BR_COUNTDOWN_SEC = int(os.environ.get('BR_COUNTDOWN_SEC', '3'))
    BR_ELIMINATION_INTERVAL_SEC = int(os.environ.get('BR_ELIMINATION_INTERVAL_SEC', '60'))
    # How long a finished room stays readable before it is dropped
    BR_FINISHED_ROOM_GRACE_SEC = float(os.environ.get('BR_FINISHED_ROOM_GRACE_SEC', '30'))
    # Share of the surviving field culled on every sweep
    BR_ELIMINATION_FRACTION = float(os.environ.get('BR_ELIMINATION_FRACTION', '0.25'))
    # Room defaults (clamped per room on creation)
    BR_MIN_PLAYERS = int(os.environ.get('BR_MIN_PLAYERS', '2'))
    BR_MAX_PLAYERS = int(os.environ.get('BR_MAX_PLAYERS', '20'))
    BR_DIFFICULTY = os.environ.get('BR_DIFFICULTY', 'hard')
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    ROOM_CODE_ATTEMPTS = int(os.environ.get('ROOM_CODE_ATTEMPTS', '10'))
    # Daily challenge puzzle difficulty (same for every player on a given date)
    DAILY_DIFFICULTY = os.environ.get('DAILY_DIFFICULTY', 'hard')
    TIME_ATTACK_LIMIT_SEC = int(os.environ.get('TIME_ATTACK_LIMIT_SEC', '600'))
    # Optional: heartbeat interval for elimination worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
