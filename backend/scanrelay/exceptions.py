"""Error taxonomy for scan sessions.

Every error is recoverable: the socket handler boundary turns it into a
direct ``error`` event and no session state is touched.
"""
from typing import Any, Dict


class ScanRelayError(Exception):
    """Base class for errors reported back to the initiating connection."""

    code = 'scan_relay_error'
    message = 'Scan relay error'

    def __init__(self, message: str = None, **identifiers: Any):
        self.message = message or self.message
        self.identifiers = identifiers
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload = {'message': self.message, 'code': self.code}
        payload.update(self.identifiers)
        return payload


class InvalidPayload(ScanRelayError):
    code = 'invalid_payload'
    message = 'Invalid payload'


class SessionNotFound(ScanRelayError):
    code = 'session_not_found'
    message = 'Session not found'

    def __init__(self, session_id=None, message: str = None):
        super().__init__(message, sessionId=session_id)
        self.session_id = session_id


class SessionOrItemNotFound(ScanRelayError):
    code = 'session_or_item_not_found'
    message = 'Session or item not found'

    def __init__(self, session_id=None, item_name=None):
        super().__init__(None, sessionId=session_id, itemName=item_name)
        self.session_id = session_id
        self.item_name = item_name


class DuplicateSession(ScanRelayError):
    code = 'duplicate_session'
    message = 'Session already exists'

    def __init__(self, session_id):
        super().__init__(None, sessionId=session_id)
        self.session_id = session_id
