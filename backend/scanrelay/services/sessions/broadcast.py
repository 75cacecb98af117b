from typing import Any, Dict

from flask_socketio import SocketIO, emit, join_room

GLOBAL_SCOPE = 'global'
SESSION_SCOPE = 'session'


def session_room(session_id: str) -> str:
    return f"session:{session_id}"


class BroadcastGateway:
    """Outbound Socket.IO events for session state changes.

    ``broadcast`` reaches every listener on the namespace under the global
    scope, or only the session room under the session scope. ``reply`` goes to
    the connection whose event is being handled and so needs a Socket.IO
    request context.
    """

    def __init__(self, socketio: SocketIO, namespace: str = '/', scope: str = GLOBAL_SCOPE):
        if scope not in (GLOBAL_SCOPE, SESSION_SCOPE):
            raise ValueError(f"Unknown broadcast scope: {scope!r}")
        self.socketio = socketio
        self.namespace = namespace
        self.scope = scope

    def broadcast(self, event: str, payload: Dict[str, Any], session_id: str = None) -> None:
        if self.scope == SESSION_SCOPE and session_id:
            self.socketio.emit(event, payload, to=session_room(session_id), namespace=self.namespace)
        else:
            self.socketio.emit(event, payload, namespace=self.namespace)

    def reply(self, event: str, payload: Dict[str, Any]) -> None:
        emit(event, payload, namespace=self.namespace)

    def join(self, session_id: str) -> None:
        # Rooms only matter when fan-out is scoped to the session
        if self.scope != SESSION_SCOPE:
            return
        join_room(session_room(session_id), namespace=self.namespace)
