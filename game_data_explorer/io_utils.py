from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests

from .config import ExplorerSettings
from .map_index import MapIndexCache, MapIndexState

logger = logging.getLogger(__name__)


class DatasetLoadError(ValueError):
    """A dataset could not be fetched or is not valid JSON."""


def read_json_content(file_obj):
    """Read JSON content from an uploaded file or file path."""
    if file_obj is None:
        raise DatasetLoadError("No file uploaded.")

    try:
        if hasattr(file_obj, 'read'):
            if hasattr(file_obj, 'seek'):
                file_obj.seek(0)
            content = file_obj.read()
            if isinstance(content, bytes):
                content = content.decode('utf-8')
            return json.loads(content)

        path = file_obj.name if hasattr(file_obj, 'name') else file_obj
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetLoadError(f"Error parsing JSON: {exc}") from exc


def dataset_url(name: str, settings: ExplorerSettings) -> str:
    return settings.raw_base + name.lstrip('/')


def dataset_source_url(name: str, settings: ExplorerSettings) -> str:
    return settings.repo_url + name.lstrip('/')


def fetch_dataset(name: str, settings: ExplorerSettings, session: Optional[requests.Session] = None) -> Any:
    """Download a dataset file from the raw data source and parse it."""
    url = dataset_url(name, settings)
    getter = session.get if session is not None else requests.get
    logger.info("Fetching %s", url)
    try:
        res = getter(url, timeout=settings.timeout, headers={'Cache-Control': 'no-cache'})
    except requests.RequestException as exc:
        raise DatasetLoadError(f"Failed to load {name}: {exc}") from exc

    if res.status_code >= 400:
        raise DatasetLoadError(f"Failed to load {name}: {res.status_code} {res.reason}")

    try:
        return res.json()
    except ValueError as exc:
        raise DatasetLoadError(f"Failed to load {name}: invalid JSON ({exc})") from exc


def load_map_index(cache: MapIndexCache, settings: ExplorerSettings, session: Optional[requests.Session] = None) -> MapIndexCache:
    """Fill the map index cache once; later calls are no-ops unless it failed."""
    if cache.state in (MapIndexState.READY, MapIndexState.PENDING):
        return cache
    cache.mark_pending()
    try:
        data = fetch_dataset(settings.maps_file, settings, session=session)
    except DatasetLoadError as exc:
        cache.fail(exc)
        return cache
    cache.resolve(data)
    return cache
