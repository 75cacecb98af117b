import itertools
import logging
from typing import Any, Callable, Dict, Optional

from .aggregation import now_ms
from .scheduler import EvictionScheduler
from .store import SessionStore

logger = logging.getLogger(__name__)

_id_sequence = itertools.count(1)


class LifecycleManager:
    """Session start and finish, plus eviction after the grace period."""

    def __init__(self, store: SessionStore, gateway, scheduler: EvictionScheduler,
                 grace_period_sec: float = 30, clock: Callable[[], int] = now_ms):
        self.store = store
        self.gateway = gateway
        self.scheduler = scheduler
        self.grace_period_sec = grace_period_sec
        self.clock = clock

    def start(self, requested_id: Optional[str] = None, connection_id: Optional[str] = None):
        with self.store.lock:
            now = self.clock()
            session_id = str(requested_id) if requested_id else self._synthesize_id(connection_id, now)
            session = self.store.create(session_id, connection_id, now)
            logger.info(f"[session-start] id={session_id} origin={connection_id}")

            self.gateway.join(session_id)
            self.gateway.broadcast('session:started', {
                'sessionId': session_id,
                'timestamp': now,
                'message': 'New scan session started',
            }, session_id)
            self.gateway.reply('session:confirmed', {'sessionId': session_id, 'status': 'active'})
            return session

    def finish(self, session_id) -> Dict[str, Any]:
        """Finalize a session and schedule its eviction.

        Finishing a session that is already inactive re-broadcasts a fresh
        summary; the eviction scheduled by the first finish stays as it is.
        """
        with self.store.lock:
            session = self.store.get(session_id)
            now = self.clock()
            summary = {
                'sessionId': session_id,
                'totalItems': session.total_items,
                'totalPoints': session.total_points,
                'items': session.items_dict(),
                'duration': max(0, now - session.start_time),
                'finishedAt': now,
            }
            refinish = not session.active
            session.active = False
            logger.info(
                f"[session-finish] id={session_id} total_items={session.total_items} "
                f"total_points={session.total_points} duration={summary['duration']}ms refinish={refinish}"
            )

            self.gateway.broadcast('session:finished', {'summary': summary}, session_id)
            self.gateway.broadcast('inventory:reset', {'sessionId': session_id}, session_id)

            if not self.scheduler.pending(session_id):
                self.scheduler.schedule(session_id, self.grace_period_sec)
            return summary

    def _synthesize_id(self, connection_id: Optional[str], now: int) -> str:
        session_id = f"session_{connection_id or 'anon'}_{now}"
        while session_id in self.store:
            session_id = f"session_{connection_id or 'anon'}_{now}_{next(_id_sequence)}"
        return session_id
