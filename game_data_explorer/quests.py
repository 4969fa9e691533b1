from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .accessors import first_present, has_value, resolve_field, to_text
from .paths import slugify

QUEST_TYPE_KEYS = ['type', 'category']
QUEST_MARKER_KEYS = ['questID', 'prerequisites', 'requires', 'questName', 'quest']
QUEST_ID_KEYS = ['_key', 'id', 'questID', 'key']
QUEST_NAME_KEYS = ['name', 'title', 'questName', '_key', 'id']
QUEST_REQUIRES_KEYS = ['prerequisites', 'requires', 'requiresQuest']
QUEST_PLACEHOLDER_NAME = '(quest)'


@dataclass
class QuestNode:
    id: str
    name: str
    requires: List[str] = field(default_factory=list)
    source: Dict[str, Any] = field(default_factory=dict, repr=False)


def is_quest_like(record: Any) -> bool:
    for key in QUEST_TYPE_KEYS:
        val = resolve_field(record, key)
        if isinstance(val, str) and 'quest' in val.lower():
            return True
    return any(has_value(resolve_field(record, key)) for key in QUEST_MARKER_KEYS)


def quest_id(record: Any) -> Optional[str]:
    _, val = first_present(record, QUEST_ID_KEYS)
    if has_value(val):
        return to_text(val)
    name = resolve_field(record, 'name')
    if has_value(name):
        return slugify(to_text(name)) or None
    return None


def quest_name(record: Any) -> str:
    _, val = first_present(record, QUEST_NAME_KEYS)
    return to_text(val) if has_value(val) else QUEST_PLACEHOLDER_NAME


def quest_requirements(record: Any) -> List[str]:
    _, val = first_present(record, QUEST_REQUIRES_KEYS)
    if isinstance(val, str):
        return [val]
    if isinstance(val, list):
        return [to_text(v) for v in val if has_value(v)]
    return []


def build_quest_graph(records: List[Dict[str, Any]]) -> List[QuestNode]:
    """Collect quest-like records as nodes, in input order.

    Requirements are kept as written: ids that match no node stay in
    `requires` and cycles are not checked.
    """
    nodes: List[QuestNode] = []
    for record in records:
        if not is_quest_like(record):
            continue
        qid = quest_id(record)
        if not qid:
            continue
        nodes.append(QuestNode(qid, quest_name(record), quest_requirements(record), record))
    return nodes


def index_quests(nodes: List[QuestNode]) -> Dict[str, QuestNode]:
    by_id: Dict[str, QuestNode] = {}
    for node in nodes:
        by_id.setdefault(node.id, node)
    return by_id


def dangling_references(nodes: List[QuestNode]) -> List[Tuple[str, str]]:
    by_id = index_quests(nodes)
    return [(node.id, req) for node in nodes for req in node.requires if req not in by_id]
