"""Composition root: builds every focusline component once and wires host events.

// [LAW:no-shared-mutable-globals] Caches, scheduler and focus mode are constructed
//   here and injected; nothing lives at module level.
// [LAW:single-enforcer] Event subscriptions and their disposal happen only in Runtime.
"""

from __future__ import annotations

import logging

from focusline.app.filetype_tuning import FiletypeTuner
from focusline.app.focus_mode import FocusMode
from focusline.app.redraw_scheduler import CoalescingScheduler
from focusline.app.settings_store import PerfSettings
from focusline.app.statusline import CursorStatusRefresher, StatuslineInfo
from focusline.app.tabline import TablineProvider
from focusline.core.expiring_cache import ExpiringCache
from focusline.host import Disposer, Host, HostEvent, Timer
from focusline.io.flag_store import FlagStore

logger = logging.getLogger(__name__)


class Runtime:
    def __init__(
        self,
        host: Host,
        flag_store: FlagStore,
        settings: PerfSettings | None = None,
    ) -> None:
        self.host = host
        self.settings = settings or PerfSettings()
        self.flag_store = flag_store
        s = self.settings

        self.search_cache: ExpiringCache = ExpiringCache(
            s.search_cache_size, s.search_cache_ttl_ms, clock=host.now_ms
        )
        self.syntax_cache: ExpiringCache = ExpiringCache(
            s.syntax_cache_size, s.syntax_cache_ttl_ms, clock=host.now_ms
        )
        self.tab_cache: ExpiringCache = ExpiringCache(
            s.tab_cache_size, s.tab_cache_ttl_ms, clock=host.now_ms
        )

        self.scheduler = CoalescingScheduler(host, s.redraw_delay_ms)
        self.focus = FocusMode(host, self.scheduler, flag_store)
        self.statusline = StatuslineInfo(
            host, self.scheduler, self.search_cache, s.search_timeout_ms
        )
        self.tabline = TablineProvider(host, self.tab_cache, lambda: self.focus.active)
        self.filetypes = FiletypeTuner(host, self.syntax_cache)
        self.cursor = CursorStatusRefresher(host, self.scheduler, s.cursor_throttle_ms)

        self._disposers: list[Disposer] = []
        self._gc_timer: Timer | None = None
        self._restore_timer: Timer | None = None
        self._bound = False
        self._shut_down = False

    @property
    def caches(self) -> dict[str, ExpiringCache]:
        return {
            "search": self.search_cache,
            "syntax": self.syntax_cache,
            "tabline": self.tab_cache,
        }

    def bind(self) -> None:
        """Subscribe to host events and start the periodic cache sweep."""
        if self._bound:
            return
        self._bound = True
        host = self.host
        wiring = [
            (HostEvent.CURSOR_MOVED, self.cursor.on_cursor_moved),
            (HostEvent.INSERT_LEAVE, lambda: host.call_soon(self.statusline.clear_search)),
            (HostEvent.RECORDING_ENTER, self.statusline.on_recording_enter),
            (HostEvent.RECORDING_LEAVE, self.statusline.on_recording_leave),
            (HostEvent.WINDOW_CREATED, self.focus.reapply_to_current_view),
            (HostEvent.WINDOW_ENTERED, self.focus.reapply_to_current_view),
            (HostEvent.FILETYPE, self.filetypes.on_filetype),
            (HostEvent.FOCUS_LOST, self.gc_caches),
            (HostEvent.PROCESS_EXITING, self.shutdown),
        ]
        for event, callback in wiring:
            self._disposers.append(host.subscribe(event, callback))
        self._disposers.append(self.focus.add_listener(self.tabline.invalidate))

        interval_s = self.settings.gc_interval_ms / 1000.0
        if interval_s > 0:
            self._gc_timer = host.set_interval(interval_s, self.gc_caches)

    def startup(self) -> None:
        """Re-enter focus mode shortly after startup if the last session ended in it."""
        self._restore_timer = self.host.set_timer(
            self.settings.restore_delay_ms / 1000.0, self._restore
        )

    def _restore(self) -> None:
        self._restore_timer = None
        self.focus.restore_from_flag()

    def toggle_focus(self) -> bool:
        return self.focus.toggle()

    def clear_search(self) -> bool:
        return self.statusline.clear_search()

    def gc_caches(self) -> dict[str, int]:
        removed = {name: cache.gc() for name, cache in self.caches.items()}
        if any(removed.values()):
            logger.debug("cache sweep removed %s", removed)
        return removed

    def shutdown(self) -> None:
        """Persist the flag and release every timer and subscription. Idempotent."""
        if self._shut_down:
            return
        self._shut_down = True
        self.focus.persist()
        for timer in (self._gc_timer, self._restore_timer):
            if timer is not None:
                timer.stop()
        self._gc_timer = None
        self._restore_timer = None
        self.cursor.stop()
        self.scheduler.shutdown()
        disposers, self._disposers = self._disposers, []
        for dispose in disposers:
            dispose()
        self.flag_store.flush()
        logger.debug("runtime shut down (focus=%s)", self.focus.active)
