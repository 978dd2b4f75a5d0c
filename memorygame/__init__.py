import logging

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    level = flask_app.config.get('LOG_LEVEL', 'INFO')
    flask_app.logger.setLevel(level)
    logging.getLogger('memorygame').setLevel(level)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from memorygame.main import main
    flask_app.register_blueprint(main)

    from memorygame.api.leaderboard import leaderboard
    # Mounted under /api for the browser client and bare for older clients
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')
    flask_app.register_blueprint(leaderboard, url_prefix='/leaderboard', name='leaderboard_bare')

    from memorygame.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the leaderboard tables."""
        import memorygame.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('leaderboard-show')
    @click.option('--mode', default=None, help="'normal', 'challenge' or omit for the global list.")
    def leaderboard_show_command(mode):
        """Prints the current top leaderboard entries."""
        from memorygame.services.leaderboard.service import LeaderboardService
        with flask_app.app_context():
            entries = LeaderboardService.from_config(flask_app.config).top_entries(mode)
            if not entries:
                print('Leaderboard is empty.')
            for rank, entry in enumerate(entries, start=1):
                print(f"{rank:>2}. {entry['name']:<20} moves={entry['moves']} "
                      f"time={entry['time']} mode={entry['mode']} date={entry['date']}")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(leaderboard_show_command)

    return flask_app
