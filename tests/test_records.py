from __future__ import annotations

import pytest

from game_data_explorer.records import normalize_records, record_subtitle, record_title


def test_array_root_keeps_length_and_order() -> None:
    data = [{"name": "Ferro"}, "loose string", 7, None, {"_key": "x", "name": "Anvil"}]
    records = normalize_records(data)

    assert len(records) == len(data)
    assert records[0] is data[0]
    assert "_key" not in records[0]
    assert records[1] == {"_key": "", "value": "loose string"}
    assert records[2] == {"_key": "", "value": 7}
    assert records[3] == {"_key": "", "value": None}
    assert records[4]["_key"] == "x"


def test_object_root_sets_key_per_entry() -> None:
    data = {
        "ferro_i": {"name": "Ferro I", "_key": "stale"},
        "anvil": {"name": "Anvil"},
        "count": 12,
    }
    records = normalize_records(data)

    assert [r["_key"] for r in records] == list(data.keys())
    assert records[0]["name"] == "Ferro I"
    assert records[2] == {"_key": "count", "value": 12}
    # source mapping is not modified
    assert data["ferro_i"]["_key"] == "stale"


@pytest.mark.parametrize("root", [None, 3, "text", True, 2.5])
def test_unrecognized_root_yields_nothing(root) -> None:
    assert normalize_records(root) == []


def test_empty_containers() -> None:
    assert normalize_records([]) == []
    assert normalize_records({}) == []


def test_record_title_and_subtitle() -> None:
    assert record_title({"title": "Hatch", "_key": "h"}) == "Hatch"
    assert record_title({"_key": "h"}) == "h"
    assert record_title({"name": ""}) == "(untitled)"
    assert record_subtitle({"_key": "rattler", "type": "Weapon"}) == "rattler • Weapon"
    assert record_subtitle({"category": "Bot"}) == "Bot"
