"""Configuration helpers for the indexing engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name, {})
        return value if isinstance(value, dict) else {}

    def link_limits(self, page_type: str) -> Dict[str, int]:
        limits = self.raw.get("link_limits", {})
        return dict(limits.get(page_type, {}))


DEFAULTS: Dict[str, Any] = {
    "min_unique_blocks": 3,
    "statistics_min_flights": 10,
    "comparison_min_airlines": 1,
    "airport_min_activity": 5,
    "airline_airport_min_flights": 3,
    "link_limits": {
        "airport": {"routes": 6, "airlines": 6, "blogs": 3, "max_total": 20},
        "route": {"airports": 2, "airlines": 4, "blogs": 1, "max_total": 8},
        "airline": {"routes": 8, "airports": 5, "blogs": 3, "max_total": 15},
        "blog": {"routes": 3, "airports": 3, "airlines": 3, "blogs": 3, "max_total": 12},
    },
    "audit": {
        "sample_size": 100,
        "quick_sample_size": 50,
        "duplicate_pattern_min": 5,
        "pattern_url_cap": 10,
        "max_workers": 8,
        "deadline_seconds": None,
    },
    "content": {
        "pattern_max_usage": 3,
        "structure_max_usage": 2,
    },
    "intro": {
        "min_data_points": 2,
    },
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value


def resolve(config: EngineConfig | None) -> EngineConfig:
    return config if config is not None else load_config(None)
