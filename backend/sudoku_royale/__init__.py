from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from sudoku_royale.services.battle_royale import rooms
    rooms.configure(
        code_length=flask_app.config.get('ROOM_CODE_LENGTH'),
        max_attempts=flask_app.config.get('ROOM_CODE_ATTEMPTS'),
    )

    # Import and register blueprints here
    from sudoku_royale.main import main
    flask_app.register_blueprint(main)

    from sudoku_royale.api import register_error_handlers
    from sudoku_royale.api.games import games
    from sudoku_royale.api.daily import daily
    from sudoku_royale.api.tournament import tournament
    from sudoku_royale.api.battle_royale import battle_royale
    flask_app.register_blueprint(games, url_prefix='/api/games')
    flask_app.register_blueprint(daily, url_prefix='/api/daily')
    flask_app.register_blueprint(tournament, url_prefix='/api/tournament')
    flask_app.register_blueprint(battle_royale, url_prefix='/api/battle-royale')
    register_error_handlers(flask_app)

    # Register Socket.IO event handlers
    from sudoku_royale.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database."""
        import sudoku_royale.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    from sudoku_royale.services.sudoku.generator import DIFFICULTIES

    @click.command('generate-puzzle')
    @click.option('--difficulty', type=click.Choice(DIFFICULTIES), default='hard', show_default=True)
    @click.option('--seed', type=int, default=None, help='Defaults to a time-derived seed.')
    def generate_puzzle_command(difficulty, seed):
        """Generates a puzzle and prints its givens."""
        from sudoku_royale.services.sudoku.board import format_board
        from sudoku_royale.services.sudoku.generator import generate_puzzle
        puzzle = generate_puzzle(difficulty, seed)
        print(format_board(puzzle.givens))
        print(f'difficulty={puzzle.difficulty} seed={puzzle.seed} clues={puzzle.clue_count}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(generate_puzzle_command)

    return flask_app
