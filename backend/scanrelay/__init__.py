from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


class SessionServices:
    """Per-app session state and the services operating on it."""

    def __init__(self, store, scoring, gateway, scheduler, engine, lifecycle):
        self.store = store
        self.scoring = scoring
        self.gateway = gateway
        self.scheduler = scheduler
        self.engine = engine
        self.lifecycle = lifecycle


def build_services(flask_app) -> SessionServices:
    from scanrelay.services.sessions.aggregation import AggregationEngine
    from scanrelay.services.sessions.broadcast import BroadcastGateway
    from scanrelay.services.sessions.lifecycle import LifecycleManager
    from scanrelay.services.sessions.scheduler import EvictionScheduler
    from scanrelay.services.sessions.scoring import ScoringTable
    from scanrelay.services.sessions.store import SessionStore

    config = flask_app.config
    store = SessionStore()
    scoring = ScoringTable.from_config(config)
    gateway = BroadcastGateway(socketio, namespace=config['SOCKETIO_NAMESPACE'], scope=config['BROADCAST_SCOPE'])
    scheduler = EvictionScheduler(store, socketio.start_background_task, sleep=socketio.sleep)
    engine = AggregationEngine(store, scoring, gateway)
    lifecycle = LifecycleManager(store, gateway, scheduler, grace_period_sec=config['SESSION_GRACE_PERIOD_SEC'])
    return SessionServices(store, scoring, gateway, scheduler, engine, lifecycle)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(Config)
    if config_class is not Config:
        flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config['CORS_ALLOWED_ORIGINS']
    CORS(flask_app, origins=allowed_origins,
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_timeout=flask_app.config['SOCKETIO_PING_TIMEOUT'],
        ping_interval=flask_app.config['SOCKETIO_PING_INTERVAL'],
        max_http_buffer_size=flask_app.config['SOCKETIO_MAX_HTTP_BUFFER_SIZE'],
    )

    flask_app.extensions['scanrelay'] = build_services(flask_app)

    from scanrelay.main import main
    flask_app.register_blueprint(main)

    from scanrelay.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from scanrelay.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config['SOCKETIO_NAMESPACE'])

    flask_app.logger.info(
        f"[startup] scope={flask_app.config['BROADCAST_SCOPE']} "
        f"grace={flask_app.config['SESSION_GRACE_PERIOD_SEC']}s namespace={flask_app.config['SOCKETIO_NAMESPACE']}"
    )
    return flask_app
