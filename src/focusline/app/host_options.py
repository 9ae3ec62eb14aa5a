"""Writing option values into the host one field at a time.

// [LAW:single-enforcer] Every batch of option writes goes through apply_fields();
//   a host error for one field becomes a failed ApplyResult, never an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from focusline.host import Host, ViewId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplyResult:
    name: str
    view: ViewId | None
    ok: bool
    error: str | None = None


def apply_fields(host: Host, values: Mapping[str, object], view: ViewId | None = None) -> list[ApplyResult]:
    """Apply each field independently; one failure never stops the rest."""
    results: list[ApplyResult] = []
    for name, value in values.items():
        try:
            host.set_option(name, value, view)
        except Exception as exc:
            results.append(ApplyResult(name, view, False, str(exc) or type(exc).__name__))
        else:
            results.append(ApplyResult(name, view, True))
    return results


def log_failures(results: list[ApplyResult], context: str) -> int:
    """Log the failed writes at debug. Returns how many failed."""
    failed = [r for r in results if not r.ok]
    if failed:
        logger.debug(
            "%s: %d of %d settings not applied: %s",
            context,
            len(failed),
            len(results),
            ", ".join(f"{r.name}@{r.view!r} ({r.error})" for r in failed),
        )
    return len(failed)
