import functools
from typing import Any, Dict

from flask import current_app, request
from flask_socketio import emit

from scanrelay import socketio
from scanrelay.exceptions import ScanRelayError
from scanrelay.services.sessions.aggregation import now_ms


def _services():
    return current_app.extensions['scanrelay']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _session_key(data: Dict[str, Any]):
    """Session ids are stored as strings; numeric ids from clients map onto the same key."""
    session_id = data.get('sessionId')
    if session_id is None or session_id == '':
        return None
    return str(session_id)


def handler_boundary(handler):
    """Turn any failure inside a handler into a direct ``error`` event."""

    @functools.wraps(handler)
    def wrapper(*args):
        try:
            return handler(*args)
        except ScanRelayError as exc:
            current_app.logger.info(f"[{handler.__name__}] sid={_get_sid()} rejected: {exc.to_payload()}")
            emit('error', exc.to_payload())
        except Exception:
            current_app.logger.exception(f"[{handler.__name__}] sid={_get_sid()} unexpected failure")
            emit('error', {'message': 'Internal server error', 'code': 'internal_error'})

    return wrapper


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('welcome', {'message': 'Connected to Flask Socket.IO', 'socketId': _get_sid()})


def handle_disconnect(*args):
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")


@handler_boundary
def handle_session_start(data=None):
    _services().lifecycle.start(_session_key(_payload(data)), connection_id=_get_sid())


@handler_boundary
def handle_scan_result(data=None):
    data = _payload(data)
    _services().engine.apply_scan(_session_key(data), data.get('itemName'), data.get('quantity', 1))


@handler_boundary
def handle_quantity_adjust(data=None):
    data = _payload(data)
    _services().engine.apply_adjustment(_session_key(data), data.get('itemName'), data.get('delta'))


@handler_boundary
def handle_session_finish(data=None):
    _services().lifecycle.finish(_session_key(_payload(data)))


def handle_ping(data=None):
    emit('pong', {'timestamp': now_ms()})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the scan session event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('session:start', handle_session_start, namespace=namespace)
    socketio.on_event('scan:result', handle_scan_result, namespace=namespace)
    socketio.on_event('quantity:adjust', handle_quantity_adjust, namespace=namespace)
    socketio.on_event('session:finish', handle_session_finish, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
