import itertools
import logging
import time
from typing import Callable, Dict, Tuple

from .store import SessionStore

logger = logging.getLogger(__name__)


class EvictionScheduler:
    """Deferred removal of finished sessions, one pending task per session id.

    Each schedule stores a fresh token; a task only evicts when its token is
    still the current one for the session, so ``cancel`` (or a reschedule)
    disarms it without having to stop the background task.
    """

    def __init__(self, store: SessionStore, start_background_task: Callable, sleep: Callable = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.store = store
        self._start_background_task = start_background_task
        self._sleep = sleep
        self._clock = clock
        self._tokens = itertools.count(1)
        self._pending: Dict[str, Tuple[int, float]] = {}

    def schedule(self, session_id: str, delay_sec: float) -> int:
        token = next(self._tokens)
        deadline = self._clock() + max(0.0, float(delay_sec))
        self._pending[session_id] = (token, deadline)
        logger.info(f"[evict-set] id={session_id} delay={delay_sec}s")
        self._start_background_task(self._runner, session_id, token, deadline)
        return token

    def cancel(self, session_id: str) -> bool:
        cancelled = self._pending.pop(session_id, None) is not None
        if cancelled:
            logger.info(f"[evict-cancel] id={session_id}")
        return cancelled

    def pending(self, session_id: str) -> bool:
        return session_id in self._pending

    def _runner(self, session_id: str, token: int, deadline: float) -> None:
        sleep_for = max(0.0, deadline - self._clock())
        if sleep_for:
            self._sleep(sleep_for)
        with self.store.lock:
            current = self._pending.get(session_id)
            if current is None or current[0] != token:
                logger.info(f"[evict-abort] id={session_id} superseded or cancelled")
                return
            del self._pending[session_id]
            self.store.remove(session_id)
