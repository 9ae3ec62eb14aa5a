"""Per-filetype rendering tweaks, applied once per (filetype, buffer).

Light filetypes get a bounded syntax sync window. Heavy filetypes get cheap
wrapping and folding, but only for long buffers.
"""

from __future__ import annotations

import logging

from focusline.app.host_options import apply_fields, log_failures
from focusline.core.expiring_cache import ExpiringCache
from focusline.host import Host

logger = logging.getLogger(__name__)

FAST_FILETYPES = frozenset({"c", "cpp", "java", "python", "lua", "javascript", "typescript"})
HEAVY_FILETYPES = frozenset({"json", "yaml", "markdown", "text", "plaintex"})
HEAVY_LINE_THRESHOLD = 1000

FAST_GLOBAL_SETTINGS: dict[str, object] = {
    "syntax_sync_minlines": 200,
    "syntax_sync_maxlines": 500,
}

HEAVY_VIEW_SETTINGS: dict[str, object] = {
    "foldmethod": "manual",
    "synmaxcol": 300,
    "wrap": True,
    "linebreak": True,
    "breakindent": True,
}


class FiletypeTuner:
    def __init__(self, host: Host, seen: ExpiringCache[str, bool]) -> None:
        self._host = host
        self._seen = seen

    def on_filetype(self) -> dict[str, object]:
        """Returns the settings actually applied. Host errors are logged and skipped."""
        buf = self._host.current_buffer()
        if buf is None or not buf.filetype:
            return {}
        key = f"{buf.filetype}_{buf.buffer_id}"
        if self._seen.get(key):
            return {}

        targets: dict[str, object] = {}
        view = None
        if buf.filetype in FAST_FILETYPES:
            targets = FAST_GLOBAL_SETTINGS
        elif buf.filetype in HEAVY_FILETYPES and buf.line_count > HEAVY_LINE_THRESHOLD:
            targets = HEAVY_VIEW_SETTINGS
            view = self._host.current_view()

        results = apply_fields(self._host, targets, view)
        log_failures(results, f"filetype {buf.filetype}")
        applied = {r.name: targets[r.name] for r in results if r.ok}
        self._seen.set(key, True)
        if applied:
            logger.debug("tuned %s buffer %s: %s", buf.filetype, buf.buffer_id, sorted(applied))
        return applied
