from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .accessors import first_present, has_value, is_finite_number, resolve_field

NESTED_POSITION_PATHS = ['position', 'pos', 'coords', 'location', 'spawn']
MAP_REFERENCE_KEYS = ['map', 'mapId', 'mapName', 'zone', 'area', 'locationMap']
MAP_CENTER_KEYS = ['center', 'location', 'coords']
MAX_POSITION_DEPTH = 32

_NUMBER_RE = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


def _point(lat: Any, lng: Any) -> Optional[GeoPoint]:
    if is_finite_number(lat) and is_finite_number(lng):
        return GeoPoint(lat=lat, lng=lng)
    return None


def _numeric_pair(value: Any, lat_key: str, lng_key: str) -> Optional[GeoPoint]:
    if not isinstance(value, dict):
        return None
    return _point(value.get(lat_key), value.get(lng_key))


def _parse_number(text: str) -> Optional[float]:
    text = text.strip()
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


def parse_coordinate_string(text: str) -> Optional[GeoPoint]:
    """Parse 'lat,lng' text; anything but exactly two numbers yields None."""
    parts = text.split(',')
    if len(parts) != 2:
        return None
    lat, lng = _parse_number(parts[0]), _parse_number(parts[1])
    if lat is None or lng is None:
        return None
    return _point(lat, lng)


# --- Rules, evaluated in order; each takes the value and its nesting depth ---

def rule_lat_lng(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    return _numeric_pair(value, 'lat', 'lng')


def rule_latitude_longitude(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    return _numeric_pair(value, 'latitude', 'longitude')


def rule_xy(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    # x runs along longitude, y along latitude
    return _numeric_pair(value, 'y', 'x')


def rule_pair_sequence(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    if isinstance(value, list) and len(value) >= 2:
        return _point(value[1], value[0])
    return None


def rule_nested_position(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    if depth >= MAX_POSITION_DEPTH:
        return None
    for path in NESTED_POSITION_PATHS:
        sub = resolve_field(value, path)
        if not has_value(sub):
            continue
        found = match_coordinate_rule(sub, depth + 1)[1]
        if found is not None:
            return found
    return None


def rule_map_xy(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    return _numeric_pair(value, 'mapY', 'mapX')


def _scan_coordinate_strings(fields: Iterable[Any]) -> Optional[GeoPoint]:
    for field in fields:
        if isinstance(field, str) and field.count(',') == 1:
            found = parse_coordinate_string(field)
            if found is not None:
                return found
    return None


def rule_coordinate_string(value: Any, depth: int = 0) -> Optional[GeoPoint]:
    if isinstance(value, str):
        return parse_coordinate_string(value)
    if isinstance(value, dict):
        return _scan_coordinate_strings(value.values())
    if isinstance(value, list):
        return _scan_coordinate_strings(value)
    return None


COORDINATE_RULES: List[Tuple[str, Callable[[Any, int], Optional[GeoPoint]]]] = [
    ('lat_lng', rule_lat_lng),
    ('latitude_longitude', rule_latitude_longitude),
    ('xy', rule_xy),
    ('pair_sequence', rule_pair_sequence),
    ('nested_position', rule_nested_position),
    ('map_xy', rule_map_xy),
    ('coordinate_string', rule_coordinate_string),
]


def match_coordinate_rule(value: Any, depth: int = 0) -> Tuple[str, Optional[GeoPoint]]:
    """Return the name of the first rule that produced a point, and the point.

    `depth` counts how many position/pos/coords/location/spawn hops led
    here; past MAX_POSITION_DEPTH nested lookups stop.
    """
    if value is None:
        return '', None
    for name, rule in COORDINATE_RULES:
        found = rule(value, depth)
        if found is not None:
            return name, found
    return '', None


def extract_coordinates(value: Any) -> Optional[GeoPoint]:
    return match_coordinate_rule(value)[1]


def find_map_reference(record: Any) -> Any:
    _, ref = first_present(record, MAP_REFERENCE_KEYS)
    return ref if has_value(ref) else None


def map_center(entry: Any) -> Optional[GeoPoint]:
    _, center = first_present(entry, MAP_CENTER_KEYS)
    if not has_value(center):
        return None
    return extract_coordinates(center)


def locate_record(record: Any, map_index=None) -> Optional[GeoPoint]:
    """Point for a record, falling back to the center of the map it references.

    map_index is a MapIndexCache (or None); while it is not ready the
    fallback finds nothing and callers are expected to retry later.
    """
    direct = extract_coordinates(record)
    if direct is not None:
        return direct
    if map_index is None:
        return None
    ref = find_map_reference(record)
    if ref is None:
        return None
    entry = map_index.find(ref)
    if entry is None:
        return None
    return map_center(entry)
