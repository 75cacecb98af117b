import logging
import time
from typing import Callable

from scanrelay.exceptions import InvalidPayload, SessionNotFound, SessionOrItemNotFound
from scanrelay.models import ItemEntry, Session
from .scoring import ScoringTable, normalize_code
from .store import SessionStore

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class AggregationEngine:
    """Applies scans and quantity adjustments to active sessions.

    Validation happens before any mutation, so a failed call leaves the session
    untouched and emits nothing. Session totals are always rebuilt from the
    whole item mapping rather than patched incrementally.
    """

    def __init__(self, store: SessionStore, scoring: ScoringTable, gateway, clock: Callable[[], int] = now_ms):
        self.store = store
        self.scoring = scoring
        self.gateway = gateway
        self.clock = clock

    def apply_scan(self, session_id, item_code, quantity=1) -> ItemEntry:
        key = normalize_code(item_code) if item_code is not None else ''
        if not session_id or not key:
            raise InvalidPayload(sessionId=session_id, itemName=item_code)
        if not _is_int(quantity) or quantity < 1:
            raise InvalidPayload('Quantity must be a positive integer',
                                 sessionId=session_id, itemName=item_code, quantity=quantity)

        with self.store.lock:
            session = self.store.find(session_id)
            if session is None or not session.active:
                raise SessionNotFound(session_id)

            now = self.clock()
            item = session.items.get(key)
            if item is None:
                item = ItemEntry(
                    name=key,
                    quantity=quantity,
                    points_per_item=self.scoring.points_for(key),
                    last_scanned=now,
                )
                session.items[key] = item
            else:
                item.quantity += quantity
                item.last_scanned = now
            self._touch(session, now)

            logger.info(
                f"[scan] session={session_id} item={key} +{quantity} qty={item.quantity} "
                f"total_items={session.total_items} total_points={session.total_points}"
            )

            self.gateway.join(session_id)
            self.gateway.broadcast('scan:update', {
                'sessionId': session_id,
                'item': item.to_dict(),
                'session': session.snapshot(),
            }, session_id)
            self._broadcast_inventory(session, key, item.quantity)
            self.gateway.reply('scan:confirmed', {
                'success': True,
                'item': item.to_dict(),
                'totalPoints': session.total_points,
            })
            return item

    def apply_adjustment(self, session_id, item_code, delta) -> int:
        """Shift an existing item's quantity by ``delta``, clamped at zero.

        Returns the new quantity; an item reaching zero is dropped from the
        session. Adjustments never create items.
        """
        key = normalize_code(item_code) if item_code else ''
        with self.store.lock:
            session = self.store.find(session_id) if session_id else None
            if session is None or not session.active or not key or key not in session.items:
                raise SessionOrItemNotFound(session_id, key)
            if not _is_int(delta):
                raise InvalidPayload('Delta must be an integer', sessionId=session_id, itemName=key, delta=delta)

            now = self.clock()
            item = session.items[key]
            new_quantity = max(0, item.quantity + delta)
            if new_quantity == 0:
                del session.items[key]
            else:
                item.quantity = new_quantity
                item.last_scanned = now
            self._touch(session, now)

            logger.info(
                f"[adjust] session={session_id} item={key} delta={delta} qty={new_quantity} "
                f"total_items={session.total_items} total_points={session.total_points}"
            )

            self.gateway.join(session_id)
            self.gateway.broadcast('quantity:updated', {
                'sessionId': session_id,
                'itemName': key,
                'newQuantity': new_quantity,
                'session': session.snapshot(),
            }, session_id)
            self._broadcast_inventory(session, key, new_quantity)
            return new_quantity

    def _touch(self, session: Session, now: int) -> None:
        session.recompute_totals()
        session.last_update = now

    def _broadcast_inventory(self, session: Session, key: str, quantity: int) -> None:
        # Lightweight delta for dashboards that don't need the full snapshot
        self.gateway.broadcast('inventory:update', {
            'sessionId': session.id,
            'itemName': key,
            'quantity': quantity,
            'lastUpdate': session.last_update,
        }, session.id)
