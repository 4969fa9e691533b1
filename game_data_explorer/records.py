from __future__ import annotations

from typing import Any, Dict, List

from .accessors import first_present, has_value, to_text

TITLE_KEYS = ['name', 'title', '_key', 'id']
SEARCH_TITLE_KEYS = ['name', 'title', 'id', '_key']


def normalize_records(data: Any) -> List[Dict[str, Any]]:
    """Turn a top-level JSON document into an ordered list of records.

    - list -> one record per element; dict elements are kept as-is, anything
      else is wrapped as {'_key': '', 'value': element}
    - dict -> one record per entry, carrying the entry key in '_key'
    - anything else -> []
    """
    if isinstance(data, list):
        records: List[Dict[str, Any]] = []
        for entry in data:
            if isinstance(entry, dict):
                records.append(entry)
            else:
                records.append({'_key': '', 'value': entry})
        return records

    if isinstance(data, dict):
        records = []
        for key, value in data.items():
            if isinstance(value, dict):
                record = dict(value)
                record['_key'] = key
            else:
                record = {'_key': key, 'value': value}
            records.append(record)
        return records

    return []


def record_title(record: Dict[str, Any], default: str = '(untitled)') -> str:
    _, val = first_present(record, TITLE_KEYS)
    return to_text(val) if has_value(val) else default


def record_search_title(record: Dict[str, Any]) -> str:
    _, val = first_present(record, SEARCH_TITLE_KEYS)
    return to_text(val)


def record_type(record: Dict[str, Any]) -> str:
    _, val = first_present(record, ['type', 'category'])
    return to_text(val)


def record_subtitle(record: Dict[str, Any]) -> str:
    """'_key or id' followed by the record type, for list rows and popups."""
    _, ident = first_present(record, ['_key', 'id'])
    parts = [to_text(ident)] if has_value(ident) else []
    kind = record_type(record)
    if kind:
        parts.append(kind)
    return ' • '.join(parts)
