"""Textual host for focusline.

// [LAW:locality-or-seam] FocuslineApp implements focusline.host.Host; all core logic
//   lives in focusline.app.* and is reached through self.runtime.
// [LAW:single-enforcer] request_redraw() is the only place tabline/statusline widgets
//   are re-rendered.

Panes stand in for editor windows. Options are plain dicts (global on the app,
view-local on each pane). Changing an option re-renders the pane it affects,
like an editor would; the tabline and statusline only change on request_redraw().
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from rich.style import Style
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import Static

from focusline.app.runtime import Runtime
from focusline.app.settings_store import PerfSettings
from focusline.host import (
    BufferInfo,
    Disposer,
    HostError,
    HostEvent,
    RedrawKind,
    SearchCount,
    TabInfo,
    ViewId,
)
from focusline.io.flag_store import FlagStore
from focusline.tui.panes import SAMPLE_DOCUMENTS, EditorPane

logger = logging.getLogger(__name__)

DEFAULT_GLOBAL_OPTIONS: dict[str, object] = {
    "syntax": True,
    "showcmd": True,
    "laststatus": 2,
    "cmdheight": 1,
    "showmode": True,
    "ruler": True,
    "statusline": "default",
    "status_highlight": {"bg": "#3a3a3a", "fg": "#d0d0d0", "bold": True},
}

# Global options whose change needs every pane re-rendered.
_PANE_GLOBALS = frozenset({"syntax"})


def highlight_style(highlight: object) -> Style:
    if not isinstance(highlight, dict):
        return Style()
    bg = highlight.get("bg")
    return Style(
        color=highlight.get("fg") or None,
        bgcolor=None if bg in (None, "NONE") else bg,
        bold=bool(highlight.get("bold")),
    )


class FocuslineApp(App):
    """Editor-like Textual host running the focusline runtime."""

    TITLE = "focusline"

    CSS = """
    #tabline { height: 1; }
    #views { height: 1fr; }
    #statusline { height: 1; }
    #cmdline { height: 1; color: $text-muted; }
    """

    BINDINGS = [
        ("z", "toggle_focus", "Focus"),
        ("n", "split", "Split"),
        ("x", "close_view", "Close"),
        ("q", "record", "Record"),
        ("slash", "search('def')", "Search"),
        ("i", "insert", "Insert"),
        ("escape", "escape", "Normal"),
        ("j", "cursor(1)", "Down"),
        ("k", "cursor(-1)", "Up"),
    ]

    def __init__(
        self,
        flag_store: FlagStore | None = None,
        settings: PerfSettings | None = None,
        restore: bool = True,
        views: int = 2,
    ) -> None:
        super().__init__()
        self.global_options: dict[str, object] = dict(DEFAULT_GLOBAL_OPTIONS)
        self._event_listeners: dict[HostEvent, list[Callable[[], None]]] = {}
        self._panes: dict[int, EditorPane] = {}
        self._next_view_id = 1
        self._current_view: int | None = None
        self._initial_views = max(1, int(views))
        self._restore_on_start = restore
        self._search_pattern = ""
        self._hlsearch = False
        self._macro_register = ""
        self._insert_mode = False
        self.redraw_log: list[frozenset[RedrawKind]] = []
        self.runtime = Runtime(self, flag_store or FlagStore(), settings)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def compose(self) -> ComposeResult:
        yield Static(id="tabline")
        with Horizontal(id="views"):
            for _ in range(self._initial_views):
                yield self._new_pane()
        yield Static(id="statusline")
        yield Static(id="cmdline")

    def _new_pane(self) -> EditorPane:
        view_id = self._next_view_id
        self._next_view_id += 1
        title, filetype, text = SAMPLE_DOCUMENTS[(view_id - 1) % len(SAMPLE_DOCUMENTS)]
        pane = EditorPane(view_id, title, filetype, text)
        self._panes[view_id] = pane
        return pane

    def on_mount(self) -> None:
        self.runtime.bind()
        first = next(iter(self._panes.values()))
        self._current_view = first.view_id
        first.focus()
        self.emit_event(HostEvent.FILETYPE)
        self.request_redraw(frozenset({RedrawKind.FULL}))
        if self._restore_on_start:
            self.runtime.startup()

    def on_unmount(self) -> None:
        self.runtime.shutdown()

    def on_app_blur(self, _event: events.AppBlur) -> None:
        self.emit_event(HostEvent.FOCUS_LOST)

    # ------------------------------------------------------------------
    # Host protocol
    # ------------------------------------------------------------------

    def subscribe(self, event: HostEvent, callback: Callable[[], None]) -> Disposer:
        callbacks = self._event_listeners.setdefault(HostEvent(event), [])
        callbacks.append(callback)

        def _dispose() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return _dispose

    def emit_event(self, event: HostEvent) -> None:
        for callback in list(self._event_listeners.get(event, ())):
            callback()

    def _pane(self, view: ViewId) -> EditorPane:
        pane = self._panes.get(view)  # type: ignore[arg-type]
        if pane is None:
            raise HostError(f"view {view!r} is closed")
        return pane

    def get_option(self, name: str, view: ViewId | None = None) -> object:
        if view is None:
            return self.global_options.get(name)
        return self._pane(view).view_options.get(name)

    def set_option(self, name: str, value: object, view: ViewId | None = None) -> None:
        if view is not None:
            pane = self._pane(view)
            pane.view_options[name] = value
            pane.refresh_content(bool(self.global_options.get("syntax")))
            return
        self.global_options[name] = value
        if name in _PANE_GLOBALS:
            for pane in self._panes.values():
                pane.refresh_content(bool(value))
        elif name in ("laststatus", "cmdheight"):
            self._apply_chrome()
        elif name in ("statusline", "status_highlight"):
            self.runtime.scheduler.schedule(RedrawKind.STATUS)

    def list_views(self) -> Iterable[ViewId]:
        return list(self._panes)

    def current_view(self) -> ViewId | None:
        return self._current_view

    def request_redraw(self, kinds: frozenset[RedrawKind]) -> None:
        self.redraw_log.append(kinds)
        full = RedrawKind.FULL in kinds
        if full:
            syntax_on = bool(self.global_options.get("syntax"))
            for pane in self._panes.values():
                pane.refresh_content(syntax_on)
            self._apply_chrome()
        if full or RedrawKind.TABLINE in kinds:
            self._query_static("#tabline").update(self.runtime.tabline.render())
        if full or RedrawKind.STATUS in kinds:
            self._query_static("#statusline").update(self.statusline_text())
            self._query_static("#cmdline").update(self.cmdline_text())

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def call_soon(self, callback: Callable[[], None]) -> None:
        self.call_later(callback)

    def search_highlight_active(self) -> bool:
        return self._hlsearch

    def search_pattern(self) -> str:
        return self._search_pattern

    def search_count(self, timeout_ms: int) -> SearchCount | None:
        pane = self._panes.get(self._current_view)  # type: ignore[arg-type]
        if pane is None or not self._search_pattern:
            return None
        hits = [i for i, line in enumerate(pane.lines) if self._search_pattern in line]
        if not hits:
            return SearchCount(0, 0)
        current = next((n for n, i in enumerate(hits, start=1) if i >= pane.cursor_line), len(hits))
        return SearchCount(current, len(hits))

    def clear_search_highlight(self) -> None:
        self._hlsearch = False

    def recording_register(self) -> str:
        return self._macro_register

    def tabs(self) -> list[TabInfo]:
        return [TabInfo(pane.file_name) for pane in self._panes.values()]

    def current_tab(self) -> int:
        ids = list(self._panes)
        return ids.index(self._current_view) + 1 if self._current_view in ids else 1

    def current_buffer(self) -> BufferInfo | None:
        pane = self._panes.get(self._current_view)  # type: ignore[arg-type]
        if pane is None:
            return None
        return BufferInfo(pane.view_id, pane.filetype, len(pane.lines))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _query_static(self, selector: str) -> Static:
        return self.query_one(selector, Static)

    def _apply_chrome(self) -> None:
        try:
            self._query_static("#statusline").display = int(self.global_options.get("laststatus") or 0) > 0
            self._query_static("#cmdline").display = int(self.global_options.get("cmdheight") or 0) > 0
        except NoMatches:
            pass

    def statusline_text(self) -> Text:
        style = highlight_style(self.global_options.get("status_highlight"))
        template = self.global_options.get("statusline")
        if template != "default":
            return Text(str(template), style=style)
        pane = self._panes.get(self._current_view)  # type: ignore[arg-type]
        if pane is None:
            return Text("", style=style)
        info = self.runtime.statusline
        left = f"{pane.file_name} [{pane.filetype}]"
        right = f"{info.macro_info()}Ln {pane.cursor_line + 1}/{len(pane.lines)}, Col 1{info.search_info()}"
        return Text.assemble(left, "  ", right, style=style)

    def cmdline_text(self) -> Text:
        parts = []
        if self.global_options.get("showmode") and self._insert_mode:
            parts.append("-- INSERT --")
        if self.global_options.get("showcmd") and self._macro_register:
            parts.append(f"recording @{self._macro_register}")
        return Text("  ".join(parts))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def view_entered(self, view_id: int) -> None:
        if view_id not in self._panes or view_id == self._current_view:
            return
        self._current_view = view_id
        self.emit_event(HostEvent.WINDOW_ENTERED)
        self.runtime.scheduler.schedule(RedrawKind.STATUS)
        self.runtime.scheduler.schedule(RedrawKind.TABLINE)

    def action_toggle_focus(self) -> None:
        self.runtime.toggle_focus()

    async def action_split(self) -> None:
        pane = self._new_pane()
        await self.query_one("#views", Horizontal).mount(pane)
        self._current_view = pane.view_id
        pane.refresh_content(bool(self.global_options.get("syntax")))
        self.emit_event(HostEvent.WINDOW_CREATED)
        self.emit_event(HostEvent.FILETYPE)
        pane.focus()
        self.runtime.scheduler.schedule(RedrawKind.TABLINE)

    async def action_close_view(self) -> None:
        if len(self._panes) <= 1 or self._current_view is None:
            return
        pane = self._panes.pop(self._current_view)
        await pane.remove()
        nxt = next(iter(self._panes.values()))
        self._current_view = None
        nxt.focus()
        self.view_entered(nxt.view_id)

    def action_record(self) -> None:
        if self._macro_register:
            self._macro_register = ""
            self.emit_event(HostEvent.RECORDING_LEAVE)
        else:
            self._macro_register = "q"
            self.emit_event(HostEvent.RECORDING_ENTER)

    def action_search(self, pattern: str) -> None:
        self._search_pattern = pattern
        self._hlsearch = True
        self.runtime.scheduler.schedule(RedrawKind.STATUS)

    def action_insert(self) -> None:
        if self._insert_mode:
            return
        self._insert_mode = True
        self.emit_event(HostEvent.INSERT_ENTER)
        self.runtime.scheduler.schedule(RedrawKind.STATUS)

    def action_escape(self) -> None:
        if self._insert_mode:
            self._insert_mode = False
            self.emit_event(HostEvent.INSERT_LEAVE)
            self.runtime.scheduler.schedule(RedrawKind.STATUS)
        else:
            self.runtime.clear_search()

    def action_cursor(self, delta: int) -> None:
        pane = self._panes.get(self._current_view)  # type: ignore[arg-type]
        if pane is None:
            return
        pane.move_cursor(delta)
        pane.refresh_content(bool(self.global_options.get("syntax")))
        self.emit_event(HostEvent.CURSOR_MOVED)

    async def action_quit(self) -> None:
        self.emit_event(HostEvent.PROCESS_EXITING)
        self.exit()
