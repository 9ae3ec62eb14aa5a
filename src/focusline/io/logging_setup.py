"""Logging bootstrap for focusline.

// [LAW:single-enforcer] Handler wiring for the `focusline` logger happens only here.
// [LAW:one-source-of-truth] The resolved level, file path and console sink are
//   returned as LoggingRuntime; callers never re-derive them from the environment.

Every module logs through `logging.getLogger(__name__)`; records propagate to
the `focusline` logger, which always writes a rotating file and optionally a
console sink. The console sink is stderr for headless use, or Textual's own
log (visible with `textual console`) while a Textual host owns the terminal.

Environment:
    FOCUSLINE_LOG_LEVEL  level name or number (default INFO)
    FOCUSLINE_LOG_FILE   explicit log file path
    FOCUSLINE_LOG_DIR    directory for per-session log files
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from textual.logging import TextualHandler

ROOT_LOGGER = "focusline"
CONSOLE_SINKS = ("stderr", "textual")

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
_CONSOLE_FORMAT = "[%(name)s] %(levelname)s %(message)s"
_MAX_BYTES = 20 * 1024 * 1024
_BACKUPS = 5


@dataclass(frozen=True)
class LoggingRuntime:
    level_name: str
    level: int
    file_path: str
    console: str | None


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str | None) -> tuple[str, int]:
    text = str(raw or "INFO").strip().upper()
    if text.isdigit():
        level = int(text)
    else:
        level = logging.getLevelName(text)
        if not isinstance(level, int):
            level = logging.INFO
    return logging.getLevelName(level), level


def _safe_name(value: str) -> str:
    candidate = "".join(ch if (ch.isalnum() or ch in {"-", "_"}) else "-" for ch in value)
    return candidate.strip("-_") or "session"


def _session_log_path(session_name: str) -> Path:
    log_dir = Path(
        os.environ.get("FOCUSLINE_LOG_DIR", os.path.expanduser("~/.local/share/focusline/logs"))
    )
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return log_dir / f"{_safe_name(session_name)}-{ts}-{os.getpid()}.log"


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def _console_handler(console: str) -> logging.Handler:
    if console == "textual":
        # Only the app log; stderr belongs to the running TUI.
        handler: logging.Handler = TextualHandler(stderr=False, stdout=False)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    return handler


def configure(session_name: str = "focusline", *, console: str | None = "stderr") -> LoggingRuntime:
    """Attach the file handler and the console sink to the `focusline` logger.

    console is "stderr", "textual" or None (file only). Idempotent: later calls
    return the first runtime unchanged, whatever their arguments.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME
    if console is not None and console not in CONSOLE_SINKS:
        raise ValueError(f"unknown console sink {console!r}; expected one of {CONSOLE_SINKS}")

    level_name, level = _parse_level(os.environ.get("FOCUSLINE_LOG_LEVEL"))
    explicit = os.environ.get("FOCUSLINE_LOG_FILE")
    file_path = Path(explicit) if explicit else _session_log_path(session_name)

    handlers = [_file_handler(file_path)]
    if console is not None:
        handlers.append(_console_handler(console))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    # Third-party libraries stay at warning+ unless the root logger says otherwise.
    root = logging.getLogger()
    if root.level > logging.WARNING:
        root.setLevel(logging.WARNING)
    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name, level, str(file_path), console)
    logger.debug("logging configured: %s", _RUNTIME)
    return _RUNTIME


def reset() -> None:
    """Detach and close every handler configure() added. configure() may run again."""
    global _RUNTIME
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging.captureWarnings(False)
    _RUNTIME = None


def get_runtime() -> LoggingRuntime | None:
    return _RUNTIME
