from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .coordinates import locate_record
from .records import record_title, record_type

DEFAULT_KIND = 'default'

# Later entries win, so a 'quest weapon' is drawn as a quest.
KIND_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ('weapon', ('weapon',)),
    ('blueprint', ('blueprint', 'recipe', 'project')),
    ('quest', ('quest',)),
    ('bot', ('bot',)),
]

KIND_COLORS: Dict[str, str] = {
    DEFAULT_KIND: '#6fb3ff',
    'weapon': '#ff8a8a',
    'blueprint': '#ffd26b',
    'quest': '#9b6bff',
    'bot': '#7ee7b7',
}


@dataclass(frozen=True)
class Marker:
    ref: int
    lat: float
    lng: float
    label: str
    kind: str = DEFAULT_KIND

    @property
    def color(self) -> str:
        return KIND_COLORS.get(self.kind, KIND_COLORS[DEFAULT_KIND])


def marker_kind(record: Dict[str, Any]) -> str:
    type_text = record_type(record).lower()
    kind = DEFAULT_KIND
    for name, keywords in KIND_KEYWORDS:
        if any(word in type_text for word in keywords):
            kind = name
    return kind


def build_markers(records: List[Dict[str, Any]], map_index=None) -> List[Marker]:
    """One marker per locatable record; `ref` is the record's index in `records`."""
    markers: List[Marker] = []
    for idx, record in enumerate(records):
        point = locate_record(record, map_index)
        if point is None:
            continue
        markers.append(Marker(idx, point.lat, point.lng, record_title(record, 'Item'), marker_kind(record)))
    return markers


def bounds(markers: List[Marker]) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """((south, west), (north, east)) around all markers, or None when empty."""
    if not markers:
        return None
    lats = [m.lat for m in markers]
    lngs = [m.lng for m in markers]
    return (min(lats), min(lngs)), (max(lats), max(lngs))
