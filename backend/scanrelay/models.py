from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ItemEntry:
    name: str
    quantity: int
    points_per_item: int
    last_scanned: int

    @property
    def total_points(self) -> int:
        return self.quantity * self.points_per_item

    def to_dict(self):
        return {
            'name': self.name,
            'quantity': self.quantity,
            'pointsPerItem': self.points_per_item,
            'totalPoints': self.total_points,
            'lastScanned': self.last_scanned,
        }


@dataclass
class Session:
    id: str
    origin_connection: Optional[str]
    start_time: int
    last_update: int
    items: Dict[str, ItemEntry] = field(default_factory=dict)
    total_items: int = 0
    total_points: int = 0
    active: bool = True

    def recompute_totals(self) -> None:
        """Rebuild both totals from the current item mapping."""
        self.total_items = sum(item.quantity for item in self.items.values())
        self.total_points = sum(item.total_points for item in self.items.values())

    def items_dict(self):
        return {code: item.to_dict() for code, item in self.items.items()}

    def snapshot(self):
        return {
            'totalItems': self.total_items,
            'totalPoints': self.total_points,
            'items': self.items_dict(),
            'lastUpdate': self.last_update,
        }

    def to_dict(self, include_items=True):
        data = {
            'sessionId': self.id,
            'active': self.active,
            'socketId': self.origin_connection,
            'totalItems': self.total_items,
            'totalPoints': self.total_points,
            'startTime': self.start_time,
            'lastUpdate': self.last_update,
        }
        if include_items:
            data['items'] = self.items_dict()
        return data
