"""Tabline rendering with a short-lived cache.

While focus mode is on, labels collapse to bare tab numbers.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.text import Text

from focusline.core.expiring_cache import ExpiringCache
from focusline.host import Host

TabKey = tuple[int, int, bool]

SELECTED_STYLE = "bold reverse"
TAB_STYLE = "dim"
NO_NAME = "[No Name]"


class TablineProvider:
    def __init__(
        self,
        host: Host,
        cache: ExpiringCache[TabKey, Text],
        focus_active: Callable[[], bool],
    ) -> None:
        self._host = host
        self._cache = cache
        self._focus_active = focus_active

    def render(self) -> Text:
        tabs = self._host.tabs()
        current = self._host.current_tab()
        key = (current, len(tabs), bool(self._focus_active()))
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        text = Text()
        for i, tab in enumerate(tabs, start=1):
            label = str(i)
            if not key[2]:
                name = tab.name or NO_NAME
                label = f"{label}:{name}{'+' if tab.modified else ''}"
            text.append(f" {label} ", style=SELECTED_STYLE if i == current else TAB_STYLE)
        return self._cache.set(key, text)

    def invalidate(self, _active: bool | None = None) -> None:
        self._cache.clear()
