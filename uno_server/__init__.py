from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config
from uno_server.services.games.registry import RoomRegistry

db = SQLAlchemy()
migrate = Migrate()
registry = RoomRegistry()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    registry.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from uno_server.main import main
    flask_app.register_blueprint(main)

    # Importing here binds the handlers to the initialized socketio instance
    from uno_server.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    # Ensure models are registered on the metadata
    import uno_server.models  # noqa: F401

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the stats tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
