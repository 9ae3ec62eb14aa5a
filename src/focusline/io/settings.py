"""JSON settings file for focusline.

The file lives at $XDG_CONFIG_HOME/focusline/settings.json and holds one flat
object. This module only moves dicts to and from disk; which keys mean
something is decided by focusline.app.settings_store.

// [LAW:dataflow-not-control-flow] load_settings() always returns a dict;
//   a missing, unreadable or non-object file is the empty dict.
"""

import json
import logging
import os
from pathlib import Path

from focusline.io.atomic_write import atomic_write_bytes

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "focusline" / "settings.json"


def load_settings(path: Path | None = None) -> dict:
    path = path or get_config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable settings file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring settings file %s: top level is %s, not an object", path, type(data).__name__)
        return {}
    return data


def save_settings(data: dict, path: Path | None = None) -> None:
    """Replace the whole file with data, atomically."""
    text = json.dumps(data, indent=2, sort_keys=True) + "\n"
    atomic_write_bytes(path or get_config_path(), text.encode("utf-8"))


def update_settings(changes: dict, path: Path | None = None) -> dict:
    """Merge changes into the stored settings and return the merged dict."""
    path = path or get_config_path()
    merged = {**load_settings(path), **changes}
    save_settings(merged, path)
    return merged
