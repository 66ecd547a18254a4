from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    origins = [o.strip() for o in (raw or '').split(',') if o.strip()]
    if not origins or '*' in origins:
        return '*'
    return origins


def get_coordinator():
    """The match coordinator bound to the current app."""
    return current_app.extensions['duorelay']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One coordinator per app; owns the waiting slot and session map
    from duorelay.broadcast import SocketIOBroadcaster
    from duorelay.services.match import MatchCoordinator
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['duorelay'] = MatchCoordinator(
        SocketIOBroadcaster(socketio, namespace=namespace),
        game_over_guard=flask_app.config.get('GAME_OVER_GUARD', True),
    )

    from duorelay.main import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from duorelay.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app
