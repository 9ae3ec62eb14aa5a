"""Statusline fragments: search match count and macro-recording indicator.

Both are called on every statusline render, so neither may do real work on
the hot path. search_info() is memoized per (highlight on, pattern) for a
few hundred milliseconds; macro_info() reads one string.
"""

from __future__ import annotations

import logging

from focusline.app.redraw_scheduler import CoalescingScheduler
from focusline.core.expiring_cache import ExpiringCache
from focusline.host import Host, RedrawKind, Timer

logger = logging.getLogger(__name__)

SearchKey = tuple[bool, str]

DEFAULT_SEARCH_TIMEOUT_MS = 100


class StatuslineInfo:
    def __init__(
        self,
        host: Host,
        scheduler: CoalescingScheduler,
        search_cache: ExpiringCache[SearchKey, str],
        search_timeout_ms: int = DEFAULT_SEARCH_TIMEOUT_MS,
    ) -> None:
        self._host = host
        self._scheduler = scheduler
        self._search_cache = search_cache
        self._search_timeout_ms = int(search_timeout_ms)
        self._recording = ""

    @property
    def recording(self) -> str:
        return self._recording

    def search_info(self) -> str:
        """Current match out of all matches (" 3/12"), or an empty string."""
        key = (bool(self._host.search_highlight_active()), str(self._host.search_pattern() or ""))
        cached = self._search_cache.get(key)
        if cached is not None:
            return cached
        return self._search_cache.set(key, self._compute_search_info(key))

    def _compute_search_info(self, key: SearchKey) -> str:
        active, pattern = key
        if not active or not pattern:
            return ""
        try:
            count = self._host.search_count(self._search_timeout_ms)
        except Exception:
            logger.debug("search count failed for %r", pattern, exc_info=True)
            return ""
        if count is None or count.total <= 0:
            return ""
        return f" {count.current}/{count.total}"

    def macro_info(self) -> str:
        return f" REC @{self._recording} " if self._recording else ""

    def on_recording_enter(self) -> None:
        self._recording = str(self._host.recording_register() or "")
        self._scheduler.schedule(RedrawKind.STATUS)

    def on_recording_leave(self) -> None:
        self._recording = ""
        self._scheduler.schedule(RedrawKind.STATUS)

    def clear_search(self) -> bool:
        """Turn search highlighting off and forget every cached count."""
        if not self._host.search_highlight_active():
            return False
        self._host.clear_search_highlight()
        self._search_cache.clear()
        self._scheduler.schedule(RedrawKind.STATUS)
        return True


class CursorStatusRefresher:
    """Throttles cursor-moved events into status redraws while search is highlighted.

    The first move opens a window; moves inside it are ignored. When the window
    closes a single status redraw is scheduled if highlighting is still on.
    """

    def __init__(self, host: Host, scheduler: CoalescingScheduler, throttle_ms: float = 100) -> None:
        self._host = host
        self._scheduler = scheduler
        self._throttle_s = max(0.0, float(throttle_ms)) / 1000.0
        self._timer: Timer | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def on_cursor_moved(self) -> None:
        if self._timer is not None:
            return
        self._timer = self._host.set_timer(self._throttle_s, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self._host.search_highlight_active():
            self._scheduler.schedule(RedrawKind.STATUS)

    def stop(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()
