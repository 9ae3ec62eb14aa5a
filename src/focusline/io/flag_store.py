"""Persisted focus-mode flag.

The file holds a single ASCII byte: "1" when focus mode was active at the end
of the previous session, "0" (or nothing, or no file) otherwise.

// [LAW:single-enforcer] Flag file I/O happens only in this module.
// [LAW:dataflow-not-control-flow] load() always yields a bool; unreadable means False.

Writes are write-through: save() updates the in-memory value synchronously and
hands the durable write to a background worker thread. Callers never wait on
disk and never see a write error.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from pathlib import Path

from focusline.io.atomic_write import atomic_write_bytes

logger = logging.getLogger(__name__)

_STOP = object()


def get_state_path() -> Path:
    """Return path to the flag file.

    Uses XDG_DATA_HOME (default ~/.local/share) / focusline / focus_mode_state.
    """
    data_home = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
    return Path(data_home) / "focusline" / "focus_mode_state"


def read_flag(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            data = f.read(1)
    except OSError:
        return False
    return data == b"1"


def write_flag(path: Path, active: bool) -> None:
    atomic_write_bytes(path, b"1" if active else b"0")


class FlagStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_state_path()
        self._cached: bool | None = None
        self._queue: queue.Queue = queue.Queue()
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> bool:
        """Synchronous on first call only; the cached value afterwards."""
        if self._cached is None:
            self._cached = read_flag(self._path)
        return self._cached

    def save(self, active: bool) -> None:
        self._cached = bool(active)
        if self._closed:
            logger.debug("flag store closed; %s kept in memory only", self._cached)
            return
        self._ensure_worker()
        self._queue.put(self._cached)

    def flush(self) -> None:
        """Block until every queued write has been attempted."""
        if self._worker is not None:
            self._queue.join()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            worker = self._worker
        if worker is not None:
            self._queue.put(_STOP)
            worker.join()

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is not None:
                return
            self._worker = threading.Thread(
                target=self._run, name="focusline-flag-writer", daemon=True
            )
            self._worker.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                write_flag(self._path, item)
            except Exception:
                logger.debug("Failed to persist focus-mode flag to %s", self._path, exc_info=True)
            finally:
                self._queue.task_done()
