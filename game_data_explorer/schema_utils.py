from __future__ import annotations

from typing import Any, Dict, Iterable, List, Set

from .paths import join_path


def extract_all_keys(data: Any, parent_key: str = '') -> Set[str]:
    """Recursively collect the dot paths of every field reachable through mappings.

    Mapping-valued fields are listed alongside their children. Lists are not
    descended into; field paths cannot address list elements.
    """
    keys: Set[str] = set()
    if not isinstance(data, dict):
        return keys
    for k, v in data.items():
        current_key = join_path(parent_key, str(k))
        keys.add(current_key)
        if isinstance(v, dict):
            keys.update(extract_all_keys(v, current_key))
    return keys


def collect_field_paths(records: Iterable[Dict[str, Any]], sample_size: int = 200) -> List[str]:
    """Field paths seen in the first `sample_size` records, sorted."""
    keys: Set[str] = set()
    remaining = max(0, int(sample_size))
    for record in records:
        if remaining <= 0:
            break
        keys.update(extract_all_keys(record))
        remaining -= 1
    return sorted(keys)

