from __future__ import annotations

import json

import pytest

pytest.importorskip("gradio")

from game_data_explorer.config import ExplorerSettings  # noqa: E402
from game_data_explorer.handlers_browse import (  # noqa: E402
    EMPTY_DETAIL,
    change_page,
    clear_filters,
    load_uploaded_dataset,
    refresh_view,
    render_detail_markdown,
    select_marker,
    select_result,
    show_record,
)
from game_data_explorer.handlers_quests import (  # noqa: E402
    NO_QUESTS_TEXT,
    detect_quests_handler,
    import_quests_handler,
    open_quest_handler,
)
from game_data_explorer.map_index import MapIndexCache  # noqa: E402
from game_data_explorer.sections import classify_record  # noqa: E402

SETTINGS = ExplorerSettings(page_size=2, repo_url="https://example.test/blob/")

RECORDS = [
    {"_key": "ferro", "name": "Ferro", "type": "Weapon", "lat": 1, "lng": 2, "stats": {"damage": 40}},
    {"_key": "rubber", "name": "Rubber", "type": "Material", "foundIn": ["Dam"]},
    {"_key": "snitch", "name": "Snitch", "type": "Bot", "x": 5, "y": 6},
]


def test_refresh_view_filters_pages_and_markers() -> None:
    filtered, page, rows, page_text, markers, summary = refresh_view(
        RECORDS, "", None, None, None, 1, settings=SETTINGS
    )
    assert filtered == RECORDS
    assert page == 1
    assert rows == [[0, "Ferro", "ferro • Weapon"], [1, "Rubber", "rubber • Material"]]
    assert page_text == "Page 1 — 1–2 of 3"
    assert [m[0] for m in markers] == [0, 2]
    assert summary.startswith("2 markers")


def test_refresh_view_with_field_filter() -> None:
    filtered, page, rows, _, markers, _ = refresh_view(
        RECORDS, "", "type", "bot", None, settings=SETTINGS
    )
    assert [r["_key"] for r in filtered] == ["snitch"]
    assert rows == [[0, "Snitch", "snitch • Bot"]]
    # marker refs point into the filtered list
    assert markers[0][0] == 0


def test_change_page_and_clear() -> None:
    page, rows, text = change_page(RECORDS, 1, 5, SETTINGS)
    assert page == 2
    assert rows == [[2, "Snitch", "snitch • Bot"]]
    assert text == "Page 2 — 3–3 of 3"

    cleared = clear_filters(RECORDS, None, SETTINGS)
    assert cleared[:2] == ("", "")
    assert cleared[2] == RECORDS


def test_show_record_and_selection() -> None:
    body, record = show_record(RECORDS, 0, None, "items.json", SETTINGS)
    assert record is RECORDS[0]
    assert "### Stats" in body
    assert "https://example.test/blob/items.json" in body
    assert "Location: 1, 2" in body

    assert show_record(RECORDS, 9, None, "items.json", SETTINGS) == (EMPTY_DETAIL, None)
    assert show_record(RECORDS, None, None, "items.json", SETTINGS) == (EMPTY_DETAIL, None)

    _, record = select_result(RECORDS, 2, 0, None, "items.json", SETTINGS)
    assert record is RECORDS[2]

    _, record = select_marker(RECORDS, [[2, "Snitch", 6, 5, "bot", "#7ee7b7"]], 0, None, "", SETTINGS)
    assert record is RECORDS[2]


def test_render_detail_markdown_sections() -> None:
    record = {
        "name": "Anvil",
        "recipe": [{"name": "Metal Parts", "qty": 6}, "Wires"],
        "drops": ["Dam", {"map": "Spaceport"}],
    }
    text = render_detail_markdown(record, classify_record(record))
    assert text.startswith("## Anvil")
    assert "### Blueprint / Recipe — recipe" in text
    assert "- 6 × Metal Parts" in text
    assert "- Wires" in text
    assert "### Locations / Drops (drops)" in text
    assert '- {"map":"Spaceport"}' in text
    assert "### Links" not in text


def test_map_reference_marker_after_index_ready() -> None:
    records = [{"name": "Snitch", "map": "dam"}]
    cache = MapIndexCache()
    assert refresh_view(records, "", None, None, cache, settings=SETTINGS)[4] == []
    cache.resolve([{"name": "Dam", "center": {"lat": 3, "lng": 4}}])
    assert refresh_view(records, "", None, None, cache, settings=SETTINGS)[4] == [[0, "Snitch", 3, 4, "default", "#6fb3ff"]]


def test_load_uploaded_dataset(tmp_path) -> None:
    path = tmp_path / "weapons.json"
    path.write_text(json.dumps({"ferro": {"name": "Ferro"}}), encoding="utf-8")
    records, _, message = load_uploaded_dataset(str(path))
    assert records == [{"name": "Ferro", "_key": "ferro"}]
    assert "1 entries" in message

    records, _, message = load_uploaded_dataset(None)
    assert records == []
    assert message == "No file uploaded."


def test_quest_handlers(tmp_path) -> None:
    records = [
        {"_key": "q1", "name": "A", "prerequisites": ["q0"]},
        {"_key": "q0", "name": "B", "type": "quest"},
        {"_key": "q2", "name": "C", "requires": "gone"},
    ]
    nodes, text, table = detect_quests_handler(records)
    assert [n.id for n in nodes] == ["q1", "q0", "q2"]
    assert "**Requires:** q0" in text
    assert "gone (not found)" in text
    assert table[0] == ["q1", "A", "q0"]
    assert open_quest_handler(nodes, 1) is records[1]
    assert open_quest_handler(nodes, 5) is None

    assert detect_quests_handler([])[1] == NO_QUESTS_TEXT

    path = tmp_path / "quests.json"
    path.write_text(json.dumps([{"questID": "intro", "questName": "Intro"}]), encoding="utf-8")
    nodes, _, table = import_quests_handler(str(path))
    assert table == [["intro", "Intro", ""]]
