import logging
import threading
from typing import Dict, List, Optional

from scanrelay.exceptions import DuplicateSession, SessionNotFound
from scanrelay.models import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory registry of scan sessions for the lifetime of the process.

    One instance is owned by each Flask app (see ``create_app``). Callers that
    check and then mutate a session hold ``lock`` for the whole sequence.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self.lock = threading.RLock()

    def create(self, session_id: str, origin_connection: Optional[str], now: int) -> Session:
        with self.lock:
            if session_id in self._sessions:
                raise DuplicateSession(session_id)
            session = Session(
                id=session_id,
                origin_connection=origin_connection,
                start_time=now,
                last_update=now,
            )
            self._sessions[session_id] = session
            return session

    def get(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def find(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        with self.lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info(f"[session-evicted] id={session_id}")
        return session

    def sessions(self) -> List[Session]:
        with self.lock:
            return list(self._sessions.values())

    def __contains__(self, session_id) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
