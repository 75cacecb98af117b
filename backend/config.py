import json
import os


def _origins_from_env(default):
    raw = os.environ.get('CORS_ALLOWED_ORIGINS')
    if not raw:
        return default
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def _item_points_from_env(default):
    raw = os.environ.get('ITEM_POINTS')
    if not raw:
        return default
    return {str(code).upper(): int(points) for code, points in json.loads(raw).items()}


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '4000'))
    CORS_ALLOWED_ORIGINS = _origins_from_env([
        "http://localhost:3000",
        "https://api-show-46cu.vercel.app",
        "https://www.api-show-46cu.vercel.app",
    ])
    # Socket.IO transport tuning
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    SOCKETIO_PING_TIMEOUT = int(os.environ.get('SOCKETIO_PING_TIMEOUT', '60'))
    SOCKETIO_PING_INTERVAL = int(os.environ.get('SOCKETIO_PING_INTERVAL', '25'))
    SOCKETIO_MAX_HTTP_BUFFER_SIZE = int(os.environ.get('SOCKETIO_MAX_HTTP_BUFFER_SIZE', '10000000'))
    # Finished sessions stay readable this long before eviction (seconds)
    SESSION_GRACE_PERIOD_SEC = float(os.environ.get('SESSION_GRACE_PERIOD_SEC', '30'))
    # Scoring: points for codes missing from ITEM_POINTS
    DEFAULT_ITEM_POINTS = int(os.environ.get('DEFAULT_ITEM_POINTS', '10'))
    ITEM_POINTS = _item_points_from_env({
        'APEL': 20,
        'JERUK': 15,
        'PISANG': 10,
        'MANGGA': 25,
    })
    # 'global' fans out to every listener; 'session' only to the session room
    BROADCAST_SCOPE = os.environ.get('BROADCAST_SCOPE', 'global')
