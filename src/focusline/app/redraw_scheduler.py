"""Redraw coalescing.

// [LAW:single-enforcer] The only code path that calls host.request_redraw() for
//   status/tabline updates is CoalescingScheduler._fire().
// [LAW:one-source-of-truth] RedrawKind precedence (full > tabline/status) is decided here.

Any number of schedule() calls inside one delay window collapse into a single
request_redraw() call. The window opens on the first call after idle; calls
made while a timer is pending only add their kind to the pending set.
"""

from __future__ import annotations

import logging
from enum import Enum

from focusline.host import Host, RedrawKind, Timer

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 16  # ~60fps


class SchedulerPhase(Enum):
    IDLE = "idle"
    PENDING = "pending"
    CLOSED = "closed"


def collapse_kinds(pending: set[RedrawKind]) -> frozenset[RedrawKind]:
    """Full wins over everything; otherwise the union of partial kinds."""
    if RedrawKind.FULL in pending:
        return frozenset({RedrawKind.FULL})
    return frozenset(pending)


class CoalescingScheduler:
    def __init__(self, host: Host, delay_ms: float = DEFAULT_DELAY_MS) -> None:
        self._host = host
        self._delay_s = max(0.0, float(delay_ms)) / 1000.0
        self._pending: set[RedrawKind] = set()
        self._timer: Timer | None = None
        self._closed = False
        self.fired_count = 0

    @property
    def phase(self) -> SchedulerPhase:
        if self._closed:
            return SchedulerPhase.CLOSED
        return SchedulerPhase.PENDING if self._timer is not None else SchedulerPhase.IDLE

    @property
    def pending(self) -> frozenset[RedrawKind]:
        return frozenset(self._pending)

    def schedule(self, kind: RedrawKind | str) -> bool:
        """Mark kind pending. Returns False if the scheduler was shut down."""
        if self._closed:
            logger.debug("redraw %s dropped: scheduler shut down", kind)
            return False
        self._pending.add(RedrawKind(kind))
        if self._timer is None:
            self._timer = self._host.set_timer(self._delay_s, self._fire)
        return True

    def _fire(self) -> None:
        if self._closed:
            return
        pending = self._pending
        self._pending = set()
        self._timer = None
        if not pending:
            return
        kinds = collapse_kinds(pending)
        self.fired_count += 1
        self._host.request_redraw(kinds)

    def shutdown(self) -> None:
        """Stop the outstanding timer, if any. Later schedule() calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()
        self._pending.clear()
