from __future__ import annotations

import json
import math
from typing import Any, Iterable, Tuple

from .paths import is_dotted, split_path


class _Missing:
    """Marker for a field that does not exist (as opposed to a JSON null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'MISSING'


MISSING = _Missing()


def resolve_field(data: Any, path: str) -> Any:
    """Retrieve a value from a record by direct key or dot-notation path.

    Returns MISSING when any step of the walk hits an absent key, a null or
    a non-mapping value. A present JSON null resolves to None.
    """
    if not isinstance(data, dict) or path is None:
        return MISSING

    if not is_dotted(path):
        return data.get(path, MISSING)

    val: Any = data
    for key in split_path(path):
        if not isinstance(val, dict):
            return MISSING
        val = val.get(key, MISSING)
        if val is MISSING:
            return MISSING
    return val


def has_value(value: Any) -> bool:
    """True for anything except MISSING, null and the empty string."""
    if value is MISSING or value is None:
        return False
    if isinstance(value, str) and value == '':
        return False
    return True


def first_present(data: Any, keys: Iterable[str]) -> Tuple[str, Any]:
    """Walk a candidate key list and return the first (key, value) that has a value."""
    for key in keys:
        val = resolve_field(data, key)
        if has_value(val):
            return key, val
    return '', MISSING


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    if not is_number(value):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _plain_numbers(value: Any) -> Any:
    # integral floats serialize as 7, not 7.0
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _plain_numbers(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain_numbers(v) for v in value]
    return value


def to_json_text(value: Any) -> str:
    """Compact JSON serialization used for display and full-text search."""
    try:
        value = _plain_numbers(value)
    except RecursionError:
        # too deep to rewrite; serialize as-is
        pass
    try:
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
    except (TypeError, ValueError):
        return str(value)


def to_text(value: Any) -> str:
    """Render a JSON value the way it reads in the source document."""
    if value is MISSING:
        return ''
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return to_json_text(value)
    return str(value)
