from __future__ import annotations

import re
from typing import List

_SLUG_RE = re.compile(r'[^a-z0-9]+')


def is_dotted(path: str) -> bool:
    return isinstance(path, str) and '.' in path


def split_path(path: str) -> List[str]:
    """Split a dot path into its key segments.

    Segments are kept verbatim, including empty ones, so 'a..b' looks up
    the key '' between 'a' and 'b' (which almost never exists).
    """
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)
    return path.split('.')


def join_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def slugify(text: str) -> str:
    """Lower-case text with every non-alphanumeric run collapsed to '-'."""
    if text is None:
        return ''
    return _SLUG_RE.sub('-', str(text).lower()).strip('-')
