from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

DEFAULT_RAW_BASE = "https://raw.githubusercontent.com/RaidTheory/arcraiders-data/main/"
DEFAULT_REPO_URL = "https://github.com/RaidTheory/arcraiders-data/blob/main/"
DEFAULT_DATASETS = ["items.json", "quests.json", "maps.json", "projects.json", "hideout.json"]


@dataclass(frozen=True)
class ExplorerSettings:
    """Runtime settings for the explorer.

    Notes
    - raw_base is where dataset files are fetched from; it always ends with '/'.
    - maps_file is loaded lazily as the map index for map-reference lookups.
    - Every field can be overridden through GDE_* environment variables.
    """

    raw_base: str = DEFAULT_RAW_BASE
    repo_url: str = DEFAULT_REPO_URL
    datasets: List[str] = field(default_factory=lambda: list(DEFAULT_DATASETS))
    maps_file: str = "maps.json"
    page_size: int = 30
    timeout: float = 15.0

    @staticmethod
    def normalize_base(url: str) -> str:
        u = (url or "").strip()
        if not u:
            return ""
        if not u.endswith("/"):
            u = u + "/"
        return u

    @staticmethod
    def parse_list(value: Optional[str]) -> List[str]:
        return [v.strip() for v in (value or "").split(",") if v.strip()]

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExplorerSettings":
        env = os.environ if env is None else env
        datasets = cls.parse_list(env.get("GDE_DATASETS")) or list(DEFAULT_DATASETS)
        try:
            page_size = max(1, int(env.get("GDE_PAGE_SIZE", "30")))
        except ValueError:
            page_size = 30
        try:
            timeout = float(env.get("GDE_TIMEOUT", "15"))
        except ValueError:
            timeout = 15.0
        return cls(
            raw_base=cls.normalize_base(env.get("GDE_RAW_BASE", DEFAULT_RAW_BASE)) or DEFAULT_RAW_BASE,
            repo_url=cls.normalize_base(env.get("GDE_REPO_URL", DEFAULT_REPO_URL)) or DEFAULT_REPO_URL,
            datasets=datasets,
            maps_file=(env.get("GDE_MAPS_FILE") or "maps.json").strip(),
            page_size=page_size,
            timeout=timeout,
        )
