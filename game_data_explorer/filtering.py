from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .accessors import MISSING, resolve_field, to_json_text, to_text
from .records import record_search_title


@dataclass(frozen=True)
class FilterQuery:
    text: Optional[str] = None
    field_path: Optional[str] = None
    field_value: Optional[str] = None

    @property
    def needle(self) -> str:
        return (self.text or '').strip().casefold()

    @property
    def field_active(self) -> bool:
        return bool((self.field_path or '').strip()) and bool((self.field_value or '').strip())


@dataclass
class Page:
    items: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 1
    page_size: int = 30
    total_count: int = 0
    page_count: int = 1

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size

    def describe(self) -> str:
        if not self.total_count:
            return f"Page {self.page} — 0 of 0"
        return (
            f"Page {self.page} — {self.start + 1}–{self.start + len(self.items)} "
            f"of {self.total_count}"
        )


def matches_text(record: Dict[str, Any], needle: str) -> bool:
    if not needle:
        return True
    if needle in record_search_title(record).casefold():
        return True
    return needle in to_json_text(record).casefold()


def matches_field(record: Dict[str, Any], field_path: str, field_value: str) -> bool:
    val = resolve_field(record, field_path.strip())
    if val is MISSING:
        return False
    return field_value.strip().casefold() in to_text(val).casefold()


def filter_records(records: List[Dict[str, Any]], query: Optional[FilterQuery] = None) -> List[Dict[str, Any]]:
    """Keep the records that pass every active predicate, in their original order."""
    if query is None:
        return list(records)
    needle = query.needle
    field_active = query.field_active
    out: List[Dict[str, Any]] = []
    for record in records:
        if not matches_text(record, needle):
            continue
        if field_active and not matches_field(record, query.field_path, query.field_value):
            continue
        out.append(record)
    return out


def page_count(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / max(1, page_size)))


def paginate(records: List[Any], page: int = 1, page_size: int = 30) -> Page:
    size = max(1, int(page_size))
    total = len(records)
    pages = page_count(total, size)
    current = min(pages, max(1, int(page)))
    start = (current - 1) * size
    return Page(
        items=list(records[start:start + size]),
        page=current,
        page_size=size,
        total_count=total,
        page_count=pages,
    )
