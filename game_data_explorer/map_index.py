from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from .accessors import has_value, resolve_field, to_text
from .records import normalize_records

logger = logging.getLogger(__name__)

MAP_MATCH_KEYS = ['name', 'id', 'key']


class MapIndexState(str, Enum):
    NOT_REQUESTED = 'not_requested'
    PENDING = 'pending'
    READY = 'ready'
    FAILED = 'failed'


class MapIndexCache:
    """Holds the secondary map dataset for one browsing session.

    The cache is owned by the caller and handed to coordinate lookups;
    until it is READY every lookup simply finds nothing.
    """

    def __init__(self):
        self.state = MapIndexState.NOT_REQUESTED
        self.error: Optional[str] = None
        self._entries: List[Dict[str, Any]] = []

    @property
    def ready(self) -> bool:
        return self.state is MapIndexState.READY

    @property
    def entries(self) -> Optional[List[Dict[str, Any]]]:
        return self._entries if self.ready else None

    def mark_pending(self) -> None:
        self.state = MapIndexState.PENDING
        self.error = None

    def resolve(self, data: Any) -> None:
        self._entries = normalize_records(data)
        self.state = MapIndexState.READY
        self.error = None
        logger.info("Map index ready with %d entries", len(self._entries))

    def fail(self, error: Any) -> None:
        self._entries = []
        self.state = MapIndexState.FAILED
        self.error = str(error)
        logger.warning("Map index unavailable: %s", self.error)

    def find(self, ref: Any) -> Optional[Dict[str, Any]]:
        """Find the map entry whose name, id or key equals ref (case-insensitive).

        Each entry is checked against name, then id, then key; the first
        entry in dataset order that matches wins.
        """
        if not self.ready or not has_value(ref):
            return None
        wanted = to_text(ref).lower()
        for entry in self._entries:
            for key in MAP_MATCH_KEYS:
                val = resolve_field(entry, key)
                if has_value(val) and to_text(val).lower() == wanted:
                    return entry
        return None

    def __repr__(self) -> str:
        return f"MapIndexCache(state={self.state.value}, entries={len(self._entries)})"
