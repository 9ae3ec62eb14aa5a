"""Focus mode: capture a fixed set of options, apply a quiet target, restore exactly.

// [LAW:one-source-of-truth] The field set and the focus target are FOCUS_GLOBAL_TARGET
//   and FOCUS_VIEW_TARGET. capture() reads exactly those names.
// [LAW:single-enforcer] Only FocusMode writes the focus fields; redraws go through
//   CoalescingScheduler, never straight to the host.

Toggling twice is the identity on the field set: the snapshot records each
open view's own values, so views that differed before focus mode differ the
same way after it. Views opened while focus mode was on get the values read
from the view that was current at capture time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from focusline.app.host_options import ApplyResult, apply_fields, log_failures
from focusline.app.redraw_scheduler import CoalescingScheduler
from focusline.host import Disposer, Host, RedrawKind, ViewId
from focusline.io.flag_store import FlagStore

logger = logging.getLogger(__name__)

FOCUS_STATUSLINE = "~"

FOCUS_GLOBAL_TARGET: dict[str, object] = {
    "syntax": False,
    "showcmd": False,
    "laststatus": 0,
    "cmdheight": 0,
    "showmode": False,
    "ruler": False,
    "statusline": FOCUS_STATUSLINE,
    "status_highlight": {"bg": "NONE", "fg": "#4F5258", "bold": False},
}

FOCUS_VIEW_TARGET: dict[str, object] = {
    "number": False,
    "signcolumn": "no",
    "cursorline": False,
    "cursorcolumn": False,
    "list": False,
    "spell": False,
}


@dataclass(frozen=True)
class Snapshot:
    global_fields: dict[str, object]
    view_fields: dict[str, object]
    per_view: dict[ViewId, dict[str, object]] = field(default_factory=dict)

    def fields_for_view(self, view: ViewId) -> dict[str, object]:
        return self.per_view.get(view, self.view_fields)


def _read(host: Host, names: Iterable[str], view: ViewId | None) -> dict[str, object]:
    values: dict[str, object] = {}
    for name in names:
        try:
            values[name] = host.get_option(name, view)
        except Exception as exc:
            logger.debug("cannot read %s (view=%r): %s", name, view, exc)
    return values


def capture(host: Host, global_names: Iterable[str], view_names: Iterable[str]) -> Snapshot:
    """Read the current value of every field, globally and in every open view."""
    view_names = tuple(view_names)
    per_view = {view: _read(host, view_names, view) for view in list(host.list_views())}
    current = host.current_view()
    if current in per_view:
        view_fields = per_view[current]
    else:
        view_fields = next(iter(per_view.values()), {})
    return Snapshot(
        global_fields=_read(host, global_names, None),
        view_fields=dict(view_fields),
        per_view=per_view,
    )


class GuardState(Enum):
    IDLE = "idle"
    BUSY = "busy"


class TickGuard:
    """Admits one entry per tick. Busy is released by a next-tick callback."""

    def __init__(self, call_soon: Callable[[Callable[[], None]], None]) -> None:
        self._call_soon = call_soon
        self.state = GuardState.IDLE

    def try_enter(self) -> bool:
        if self.state is GuardState.BUSY:
            return False
        self.state = GuardState.BUSY
        self._call_soon(self._release)
        return True

    def _release(self) -> None:
        self.state = GuardState.IDLE


class FocusMode:
    def __init__(
        self,
        host: Host,
        scheduler: CoalescingScheduler,
        flag_store: FlagStore,
        global_target: Mapping[str, object] | None = None,
        view_target: Mapping[str, object] | None = None,
    ) -> None:
        self._host = host
        self._scheduler = scheduler
        self._flag_store = flag_store
        self._global_target = dict(FOCUS_GLOBAL_TARGET if global_target is None else global_target)
        self._view_target = dict(FOCUS_VIEW_TARGET if view_target is None else view_target)
        self._guard = TickGuard(host.call_soon)
        self._active = False
        self._saved: Snapshot | None = None
        self._listeners: list[Callable[[bool], None]] = []
        self.last_results: list[ApplyResult] = []

    @property
    def active(self) -> bool:
        return self._active

    @property
    def saved(self) -> Snapshot | None:
        return self._saved

    @property
    def guard_state(self) -> GuardState:
        return self._guard.state

    def add_listener(self, callback: Callable[[bool], None]) -> Disposer:
        """callback(active) runs after every state change, before the redraw request."""
        self._listeners.append(callback)

        def _dispose() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _dispose

    def toggle(self) -> bool:
        """Flip focus mode. Returns False if dropped by the one-tick guard."""
        if not self._guard.try_enter():
            logger.debug("focus toggle dropped: already toggled this tick")
            return False

        self._active = not self._active
        if self._active:
            self.last_results = self._activate()
        else:
            self.last_results = self._deactivate()
        self._log_failures(self.last_results)

        self._flag_store.save(self._active)
        self._changed()
        logger.info("focus mode %s", "on" if self._active else "off")
        return True

    def restore_from_flag(self) -> bool:
        """Startup path: re-enter focus mode if the previous session ended in it."""
        if self._active or not self._flag_store.load():
            return False
        self._active = True
        self.last_results = self._activate()
        self._log_failures(self.last_results)
        self._changed()
        logger.info("focus mode restored from previous session")
        return True

    def reapply_to_current_view(self) -> list[ApplyResult]:
        """New or entered views pick up the focus view settings. Idempotent."""
        if not self._active:
            return []
        view = self._host.current_view()
        if view is None:
            return []
        results = apply_fields(self._host, self._view_target, view)
        self._log_failures(results)
        return results

    def persist(self) -> None:
        self._flag_store.save(self._active)

    def _activate(self) -> list[ApplyResult]:
        self._saved = capture(self._host, self._global_target, self._view_target)
        return self._apply(self._global_target, lambda _view: self._view_target)

    def _deactivate(self) -> list[ApplyResult]:
        saved, self._saved = self._saved, None
        if saved is None:
            return []
        return self._apply(saved.global_fields, saved.fields_for_view)

    def _apply(
        self,
        global_values: Mapping[str, object],
        view_values: Callable[[ViewId], Mapping[str, object]],
    ) -> list[ApplyResult]:
        results = apply_fields(self._host, global_values)
        for view in list(self._host.list_views()):
            results.extend(apply_fields(self._host, view_values(view), view))
        return results

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback(self._active)
        self._scheduler.schedule(RedrawKind.TABLINE)

    def _log_failures(self, results: list[ApplyResult]) -> None:
        log_failures(results, "focus mode")
