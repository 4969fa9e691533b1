from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import gradio as gr

from .accessors import to_json_text
from .config import ExplorerSettings
from .coordinates import locate_record
from .filtering import FilterQuery, Page, filter_records, paginate
from .io_utils import DatasetLoadError, dataset_source_url, fetch_dataset, load_map_index, read_json_content
from .map_index import MapIndexCache
from .markers import build_markers, bounds
from .records import normalize_records, record_subtitle, record_title
from .schema_utils import collect_field_paths
from .sections import SectionBundle, classify_record

logger = logging.getLogger(__name__)

RESULT_HEADERS = ["#", "Name", "Key / Type"]
MARKER_HEADERS = ["Ref", "Name", "Lat", "Lng", "Kind", "Color"]
EMPTY_DETAIL = "Select an item in the list or on the map to view details."


def _cell(value: Any) -> str:
    return value if isinstance(value, str) else to_json_text(value)


def result_rows(page: Page) -> List[List[Any]]:
    return [
        [page.start + offset, record_title(record), record_subtitle(record)]
        for offset, record in enumerate(page.items)
    ]


def marker_rows(records: List[Dict[str, Any]], map_index: Optional[MapIndexCache]) -> List[List[Any]]:
    return [[m.ref, m.label, m.lat, m.lng, m.kind, m.color] for m in build_markers(records, map_index)]


def marker_summary(records: List[Dict[str, Any]], map_index: Optional[MapIndexCache]) -> str:
    markers = build_markers(records, map_index)
    box = bounds(markers)
    if box is None:
        return "No markers (no coordinates found in the current results)."
    (south, west), (north, east) = box
    return f"{len(markers)} markers within [{south}, {west}] – [{north}, {east}]"


def render_detail_markdown(record: Dict[str, Any], bundle: SectionBundle, source_url: str = '') -> str:
    """Render a classified record as Markdown for the detail panel."""
    lines = [f"## {record_title(record, 'Item')}"]

    if bundle.basic:
        lines += ["", "### Basic", "", "| Field | Value |", "| --- | --- |"]
        lines += [f"| {k} | {_cell(v)} |" for k, v in bundle.basic.fields]

    if bundle.stats:
        lines += ["", "### Stats", "", "| Stat | Value |", "| --- | --- |"]
        lines += [f"| {k} | {_cell(v)} |" for k, v in bundle.stats.entries.items()]

    if bundle.blueprint:
        lines += ["", f"### Blueprint / Recipe — {bundle.blueprint.source_key}", ""]
        lines += [f"- {ing.label()}" for ing in bundle.blueprint.ingredients]

    if bundle.locations:
        lines += ["", f"### Locations / Drops ({bundle.locations.source_key})", ""]
        lines += [f"- {_cell(entry)}" for entry in bundle.locations.entries]

    if source_url:
        lines += ["", "### Links", "", f"Open dataset file on GitHub: [{source_url}]({source_url})"]
    return "\n".join(lines)


def describe_location(record: Dict[str, Any], map_index: Optional[MapIndexCache]) -> str:
    point = locate_record(record, map_index)
    if point is None:
        return ""
    return f"Location: {point.lat}, {point.lng}"


def prepare_records(data: Any, label: str):
    records = normalize_records(data)
    fields = collect_field_paths(records)
    default_field = "type" if "type" in fields else (fields[0] if fields else None)
    message = f"{label}: {len(records):,} entries"
    logger.info("Loaded %s (%d records, %d field paths)", label, len(records), len(fields))
    return records, gr.update(choices=fields, value=default_field), message


def load_remote_dataset(dataset_name: str, map_index: Optional[MapIndexCache], settings: ExplorerSettings):
    """Fetch a dataset (and the map index on first use) from the remote source."""
    if map_index is None:
        map_index = MapIndexCache()
    if not dataset_name:
        return [], map_index, gr.update(choices=[], value=None), "No dataset selected."

    try:
        data = fetch_dataset(dataset_name, settings)
    except DatasetLoadError as exc:
        logger.warning("%s", exc)
        return [], map_index, gr.update(choices=[], value=None), str(exc)

    load_map_index(map_index, settings)
    records, field_update, message = prepare_records(data, dataset_name)
    return records, map_index, field_update, message


def load_uploaded_dataset(file_obj):
    try:
        data = read_json_content(file_obj)
    except DatasetLoadError as exc:
        return [], gr.update(choices=[], value=None), str(exc)
    label = os.path.basename(str(getattr(file_obj, "name", file_obj))) or "Local JSON"
    records, field_update, message = prepare_records(data, label)
    return records, field_update, message + " (local file, the remote source is unchanged)"


def refresh_view(records, text, field_path, field_value, map_index, page=1, *, settings: ExplorerSettings):
    """Re-run the filter and return (filtered, page, rows, page text, markers, marker summary)."""
    records = records or []
    query = FilterQuery(text=text, field_path=field_path, field_value=field_value)
    filtered = filter_records(records, query)
    current = paginate(filtered, page or 1, settings.page_size)
    return (
        filtered,
        current.page,
        result_rows(current),
        current.describe(),
        marker_rows(filtered, map_index),
        marker_summary(filtered, map_index),
    )


def change_page(filtered, page, delta: int, settings: ExplorerSettings):
    current = paginate(filtered or [], (page or 1) + delta, settings.page_size)
    return current.page, result_rows(current), current.describe()


def clear_filters(records, map_index, settings: ExplorerSettings):
    return ("", "") + refresh_view(records, "", None, None, map_index, settings=settings)


def show_record(filtered, ref, map_index, dataset_name, settings: ExplorerSettings):
    """Open a record by its position in the filtered list (list rows and markers share refs)."""
    filtered = filtered or []
    try:
        idx = int(ref)
    except (TypeError, ValueError):
        return EMPTY_DETAIL, None
    if idx < 0 or idx >= len(filtered):
        return EMPTY_DETAIL, None

    record = filtered[idx]
    source_url = dataset_source_url(dataset_name, settings) if dataset_name else ''
    body = render_detail_markdown(record, classify_record(record), source_url)
    location = describe_location(record, map_index)
    if location:
        body += "\n\n" + location
    return body, record


def select_result(filtered, page, row: int, map_index, dataset_name, settings: ExplorerSettings):
    current = paginate(filtered or [], page or 1, settings.page_size)
    return show_record(filtered, current.start + row, map_index, dataset_name, settings)


def select_marker(filtered, marker_table, row: int, map_index, dataset_name, settings: ExplorerSettings):
    if marker_table is None:
        return EMPTY_DETAIL, None
    try:
        ref = marker_table.iloc[row, 0]
    except AttributeError:
        ref = marker_table[row][0] if 0 <= row < len(marker_table) else None
    except IndexError:
        ref = None
    return show_record(filtered, ref, map_index, dataset_name, settings)
