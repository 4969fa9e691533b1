from __future__ import annotations

from game_data_explorer.accessors import (
    MISSING,
    first_present,
    has_value,
    is_finite_number,
    resolve_field,
    to_json_text,
    to_text,
)
from game_data_explorer.paths import slugify, split_path


def test_direct_key_lookup() -> None:
    record = {"name": "Ferro", "level": 0, "note": None}
    assert resolve_field(record, "name") == "Ferro"
    assert resolve_field(record, "level") == 0
    assert resolve_field(record, "note") is None
    assert resolve_field(record, "absent") is MISSING


def test_dotted_path_walk() -> None:
    record = {"stats": {"damage": {"base": 12}}, "tags": ["a"], "empty": None}
    assert resolve_field(record, "stats.damage.base") == 12
    assert resolve_field(record, "stats.damage") == {"base": 12}
    assert resolve_field(record, "stats.armor.base") is MISSING
    assert resolve_field(record, "tags.0") is MISSING
    assert resolve_field(record, "empty.x") is MISSING


def test_dotted_key_is_not_a_direct_key() -> None:
    record = {"a.b": 1}
    assert resolve_field(record, "a.b") is MISSING


def test_non_mapping_inputs_never_raise() -> None:
    assert resolve_field(None, "x") is MISSING
    assert resolve_field([1, 2], "x") is MISSING
    assert resolve_field("text", "x.y") is MISSING
    assert resolve_field({"x": 1}, None) is MISSING


def test_missing_is_falsy_singleton() -> None:
    assert not MISSING
    assert type(MISSING)() is MISSING


def test_first_present_skips_empty_values() -> None:
    record = {"name": "", "title": None, "id": "ferro"}
    assert first_present(record, ["name", "title", "id"]) == ("id", "ferro")
    key, val = first_present(record, ["nope"])
    assert key == "" and val is MISSING


def test_has_value() -> None:
    assert has_value(0)
    assert has_value(False)
    assert has_value([])
    assert not has_value("")
    assert not has_value(None)
    assert not has_value(MISSING)


def test_to_text_reads_like_json() -> None:
    assert to_text(None) == "null"
    assert to_text(True) == "true"
    assert to_text(3.0) == "3"
    assert to_text(2.5) == "2.5"
    assert to_text({"a": 1}) == '{"a":1}'
    assert to_text(MISSING) == ""


def test_split_path_and_slugify() -> None:
    assert split_path("a.b.c") == ["a", "b", "c"]
    assert split_path("plain") == ["plain"]
    assert slugify("  A Bad Feeling (Part 2)! ") == "a-bad-feeling-part-2"
    assert slugify("***") == ""


def test_to_json_text_writes_integral_floats_as_integers() -> None:
    assert to_json_text({"damage": 7.0, "rate": [1.5, 2.0], "name": "Ferro"}) == '{"damage":7,"rate":[1.5,2],"name":"Ferro"}'


def test_is_finite_number_handles_huge_integers() -> None:
    assert is_finite_number(10 ** 400) is False
    assert is_finite_number(-12) is True
    assert is_finite_number(True) is False
