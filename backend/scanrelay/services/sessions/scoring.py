from typing import Dict, Mapping


class ScoringTable:
    """Point value per item code, with a default for unmapped codes."""

    def __init__(self, points: Mapping[str, int], default: int):
        self._points: Dict[str, int] = {str(code).upper(): int(value) for code, value in points.items()}
        self.default = int(default)

    def points_for(self, code: str) -> int:
        return self._points.get(normalize_code(code), self.default)

    @classmethod
    def from_config(cls, config) -> 'ScoringTable':
        return cls(config.get('ITEM_POINTS') or {}, config.get('DEFAULT_ITEM_POINTS', 10))


def normalize_code(code) -> str:
    return str(code).strip().upper()
