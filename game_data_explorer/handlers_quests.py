from __future__ import annotations

import logging
from typing import Any, Dict, List

from .io_utils import DatasetLoadError, read_json_content
from .quests import QuestNode, build_quest_graph, dangling_references
from .records import normalize_records

logger = logging.getLogger(__name__)

NO_QUESTS_TEXT = (
    "No explicit quests found in the current dataset. "
    "You can import quest JSON files using the upload button."
)


def render_quest_markdown(nodes: List[QuestNode]) -> str:
    if not nodes:
        return NO_QUESTS_TEXT

    missing = {(src, req) for src, req in dangling_references(nodes)}
    lines = [f"**{len(nodes)} quests**"]
    for node in nodes:
        lines += ["", f"#### {node.name}", f"ID: `{node.id}`"]
        if node.requires:
            reqs = [
                f"{req} (not found)" if (node.id, req) in missing else req
                for req in node.requires
            ]
            lines.append("**Requires:** " + ", ".join(reqs))
    return "\n".join(lines)


def quest_table(nodes: List[QuestNode]) -> List[List[Any]]:
    return [[node.id, node.name, ", ".join(node.requires)] for node in nodes]


def detect_quests_handler(records: List[Dict[str, Any]]):
    nodes = build_quest_graph(records or [])
    logger.info("Detected %d quests in %d records", len(nodes), len(records or []))
    return nodes, render_quest_markdown(nodes), quest_table(nodes)


def import_quests_handler(file_obj):
    try:
        data = read_json_content(file_obj)
    except DatasetLoadError as exc:
        return [], str(exc), []
    return detect_quests_handler(normalize_records(data))


def open_quest_handler(nodes: List[QuestNode], row: int):
    """Return the source record of the quest at `row`, or None."""
    nodes = nodes or []
    if row is None or row < 0 or row >= len(nodes):
        return None
    return nodes[row].source
