"""Host protocol: everything focusline needs from the editor it runs inside.

This module is a STABLE BOUNDARY and has no dependencies on other project modules.

The core never draws, never owns buffers and never dispatches keys. It reads
and writes named options, asks for redraws, and registers zero-argument
callbacks for a small set of events. Any object with this shape can host it;
focusline.tui.app.FocuslineApp is the bundled Textual implementation and
tests/harness/fake_host.py is the deterministic one.

// [LAW:one-way-deps] Core modules import this module; it imports nothing from them.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

ViewId = Hashable
Disposer = Callable[[], None]


class HostError(Exception):
    """Transient host failure (view closed, option unsupported, ...)."""


class HostEvent(str, Enum):
    CURSOR_MOVED = "cursor-moved"
    INSERT_ENTER = "insert-enter"
    INSERT_LEAVE = "insert-leave"
    RECORDING_ENTER = "recording-enter"
    RECORDING_LEAVE = "recording-leave"
    WINDOW_CREATED = "window-created"
    WINDOW_ENTERED = "window-entered"
    FILETYPE = "filetype"
    FOCUS_LOST = "focus-lost"
    PROCESS_EXITING = "process-exiting"


class RedrawKind(str, Enum):
    STATUS = "status"
    TABLINE = "tabline"
    FULL = "full"


@dataclass(frozen=True)
class SearchCount:
    current: int
    total: int


@dataclass(frozen=True)
class TabInfo:
    name: str
    modified: bool = False


@dataclass(frozen=True)
class BufferInfo:
    buffer_id: int
    filetype: str
    line_count: int


class Timer(Protocol):
    """One-shot or repeating timer handle. textual.timer.Timer satisfies this."""

    def stop(self) -> None: ...


class Host(Protocol):
    def subscribe(self, event: HostEvent, callback: Callable[[], None]) -> Disposer: ...

    def get_option(self, name: str, view: ViewId | None = None) -> object: ...

    def set_option(self, name: str, value: object, view: ViewId | None = None) -> None:
        """Set a global option (view=None) or a view-local one.

        Raises HostError (or anything else) if the view no longer exists.
        """
        ...

    def list_views(self) -> Iterable[ViewId]: ...

    def current_view(self) -> ViewId | None: ...

    def request_redraw(self, kinds: frozenset[RedrawKind]) -> None: ...

    def now_ms(self) -> float: ...

    def set_timer(self, delay: float, callback: Callable[[], None]) -> Timer: ...

    def set_interval(self, interval: float, callback: Callable[[], None]) -> Timer: ...

    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run callback on the next tick, after all currently queued work."""
        ...

    def search_highlight_active(self) -> bool: ...

    def search_pattern(self) -> str: ...

    def search_count(self, timeout_ms: int) -> SearchCount | None: ...

    def clear_search_highlight(self) -> None: ...

    def recording_register(self) -> str: ...

    def tabs(self) -> list[TabInfo]: ...

    def current_tab(self) -> int:
        """1-based index of the current tab."""
        ...

    def current_buffer(self) -> BufferInfo | None: ...
