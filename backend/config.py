import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated; '*' allows any origin (HTTP and Socket.IO)
    ALLOWED_ORIGINS = os.environ.get('ALLOWED_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Ignore hit/collect events once a session has a winner
    GAME_OVER_GUARD = _env_flag('GAME_OVER_GUARD', True)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
