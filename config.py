import os


def _origins(raw):
    if not raw or raw.strip() == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///uno.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma-separated list of allowed origins, or '*'
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'))
    # Table rules
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    ROOM_CAPACITY = int(os.environ.get('ROOM_CAPACITY', '6'))
    HAND_SIZE = int(os.environ.get('HAND_SIZE', '7'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # Bots (seconds / probability)
    BOT_THINK_DELAY_SEC = float(os.environ.get('BOT_THINK_DELAY_SEC', '1.5'))
    BOT_UNO_CALL_PROBABILITY = float(os.environ.get('BOT_UNO_CALL_PROBABILITY', '0.9'))
    # Rooms with no connected human are dropped after this grace period (sec)
    ROOM_IDLE_GRACE_SEC = float(os.environ.get('ROOM_IDLE_GRACE_SEC', '60'))
