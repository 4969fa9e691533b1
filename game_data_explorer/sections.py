from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .accessors import MISSING, first_present, has_value, is_number, resolve_field, to_text

BASIC_KEYS = ['_key', 'id', 'name', 'title', 'type', 'category', 'rarity', 'tier', 'level']
STATS_KEYS = ['stats', 'attributes', 'properties', 'modifiers', 'statList']
BLUEPRINT_KEYS = ['blueprint', 'recipe', 'ingredients', 'materials', 'requires', 'requirements', 'components']
LOCATION_KEYS = [
    'drops', 'locations', 'spawnLocations', 'spawn', 'foundIn',
    'droppedBy', 'loot', 'lootTable', 'dropLocations',
]
INGREDIENT_NAME_KEYS = ['name', 'id', 'item']
INGREDIENT_QTY_KEYS = ['qty', 'count', 'quantity', 'q', 'amount']


@dataclass(frozen=True)
class Ingredient:
    name: str
    quantity: Optional[str] = None

    def label(self) -> str:
        return f"{self.quantity} × {self.name}" if self.quantity else self.name


@dataclass
class BasicSection:
    fields: List[Tuple[str, Any]]


@dataclass
class StatsSection:
    entries: Dict[str, Any]


@dataclass
class BlueprintSection:
    source_key: str
    ingredients: List[Ingredient]


@dataclass
class LocationsSection:
    source_key: str
    entries: List[Any]


@dataclass
class SectionBundle:
    basic: Optional[BasicSection] = None
    stats: Optional[StatsSection] = None
    blueprint: Optional[BlueprintSection] = None
    locations: Optional[LocationsSection] = None
    missing: List[str] = field(default_factory=list)


def _first_container(record: Any, keys: List[str]) -> Tuple[str, Any]:
    for key in keys:
        val = resolve_field(record, key)
        if isinstance(val, (dict, list)):
            return key, val
    return '', MISSING


def extract_basic(record: Any) -> Optional[BasicSection]:
    fields = []
    for key in BASIC_KEYS:
        val = resolve_field(record, key)
        if val is not MISSING:
            fields.append((key, val))
    return BasicSection(fields) if fields else None


def stat_list_to_mapping(items: List[Any]) -> Dict[str, Any]:
    """Convert [{'name': n, 'value': v}, {'k': v}, ...] into a single mapping."""
    out: Dict[str, Any] = {}
    for el in items:
        if not isinstance(el, dict) or not el:
            continue
        if has_value(el.get('name')) and 'value' in el:
            out[to_text(el['name'])] = el['value']
        else:
            key = next(iter(el))
            out[key] = el[key]
    return out


def extract_stats(record: Any) -> Optional[StatsSection]:
    _, source = _first_container(record, STATS_KEYS)
    if source is MISSING:
        if not isinstance(record, dict):
            return None
        entries = {k: v for k, v in record.items() if is_number(v)}
    elif isinstance(source, list):
        entries = stat_list_to_mapping(source)
    else:
        entries = dict(source)
    return StatsSection(entries) if entries else None


def normalize_ingredient(el: Any) -> Optional[Ingredient]:
    if el is None:
        return None
    if isinstance(el, str):
        return Ingredient(el)
    if isinstance(el, dict):
        if not el:
            return None
        _, name = first_present(el, INGREDIENT_NAME_KEYS)
        if not has_value(name):
            name = next(iter(el))
        _, qty = first_present(el, INGREDIENT_QTY_KEYS)
        return Ingredient(to_text(name), to_text(qty) if has_value(qty) else None)
    return Ingredient(to_text(el))


def extract_blueprint(record: Any) -> Optional[BlueprintSection]:
    key, source = _first_container(record, BLUEPRINT_KEYS)
    if source is MISSING:
        return None
    if isinstance(source, list):
        ingredients = [ing for ing in (normalize_ingredient(el) for el in source) if ing is not None]
    else:
        ingredients = [
            Ingredient(str(name), to_text(qty) if has_value(qty) else None)
            for name, qty in source.items()
        ]
    return BlueprintSection(key, ingredients)


def extract_locations(record: Any) -> Optional[LocationsSection]:
    key, source = first_present(record, LOCATION_KEYS)
    if not has_value(source):
        return None
    entries = list(source) if isinstance(source, list) else [source]
    return LocationsSection(key, entries)


def classify_record(record: Any) -> SectionBundle:
    """Split a record into its basic/stats/blueprint/locations sections.

    Each section comes from the first matching candidate key only; the
    `missing` list names the sections that could not be found.
    """
    bundle = SectionBundle(
        basic=extract_basic(record),
        stats=extract_stats(record),
        blueprint=extract_blueprint(record),
        locations=extract_locations(record),
    )
    for name in ('basic', 'stats', 'blueprint', 'locations'):
        if getattr(bundle, name) is None:
            bundle.missing.append(name)
    return bundle
