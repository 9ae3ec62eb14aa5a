"""Performance settings: schema, defaults and the resolved settings object.

// [LAW:one-source-of-truth] All known settings and their defaults live in SCHEMA.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

import focusline.io.settings

logger = logging.getLogger(__name__)

# [LAW:one-source-of-truth] All known settings and defaults.
SCHEMA: dict[str, int] = {
    "redraw_delay_ms": 16,
    "search_cache_size": 10,
    "search_cache_ttl_ms": 500,
    "search_timeout_ms": 100,
    "tab_cache_size": 5,
    "tab_cache_ttl_ms": 200,
    "syntax_cache_size": 20,
    "syntax_cache_ttl_ms": 2000,
    "gc_interval_ms": 300_000,
    "cursor_throttle_ms": 100,
    "restore_delay_ms": 150,
}


# A cache holds at least one entry; a size of 0 is rejected, not clamped.
SIZE_KEYS = frozenset(k for k in SCHEMA if k.endswith("_cache_size"))


def _minimum(key: str) -> int:
    return 1 if key in SIZE_KEYS else 0


@dataclass(frozen=True)
class PerfSettings:
    redraw_delay_ms: int = SCHEMA["redraw_delay_ms"]
    search_cache_size: int = SCHEMA["search_cache_size"]
    search_cache_ttl_ms: int = SCHEMA["search_cache_ttl_ms"]
    search_timeout_ms: int = SCHEMA["search_timeout_ms"]
    tab_cache_size: int = SCHEMA["tab_cache_size"]
    tab_cache_ttl_ms: int = SCHEMA["tab_cache_ttl_ms"]
    syntax_cache_size: int = SCHEMA["syntax_cache_size"]
    syntax_cache_ttl_ms: int = SCHEMA["syntax_cache_ttl_ms"]
    gc_interval_ms: int = SCHEMA["gc_interval_ms"]
    cursor_throttle_ms: int = SCHEMA["cursor_throttle_ms"]
    restore_delay_ms: int = SCHEMA["restore_delay_ms"]

    def as_dict(self) -> dict[str, int]:
        return dataclasses.asdict(self)


def _coerce(key: str, raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and not raw.is_integer():
        return None
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    return value if value >= _minimum(key) else None


def build(values: dict) -> PerfSettings:
    """Resolve a raw mapping against SCHEMA. Unknown keys and bad values are ignored."""
    resolved: dict[str, int] = dict(SCHEMA)
    for key, raw in values.items():
        if key not in SCHEMA:
            continue
        value = _coerce(key, raw)
        if value is None:
            logger.warning("ignoring invalid setting %s=%r", key, raw)
            continue
        resolved[key] = value
    return PerfSettings(**resolved)


def create(initial_overrides: dict | None = None) -> PerfSettings:
    """Create settings, seeded from disk. Overrides win over disk, disk over defaults."""
    disk_data = focusline.io.settings.load_settings()
    merged = {k: disk_data.get(k, default) for k, default in SCHEMA.items()}
    if initial_overrides:
        merged.update(initial_overrides)
    return build(merged)
