"""Counters for distribution runs."""

import threading
from dispatch.workflows.models import BatchStats, OutcomeKind

_COUNTER_FOR_KIND = {
    OutcomeKind.AUTO_ASSIGNED: "auto_assignments",
    OutcomeKind.DEFERRED: "deferred",
    OutcomeKind.SKIPPED_CONFLICT: "skipped_conflicts",
    OutcomeKind.UNASSIGNABLE: "unassignable",
    OutcomeKind.NOT_FOUND: "not_found",
}


class StatsAccumulator:
    """
    Accumulates outcome counts and a running confidence average.

    The batch driver records task outcomes; the manual assignment path
    records overrides concurrently, hence the lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counts = {name: 0 for name in _COUNTER_FOR_KIND.values()}
        self._processed = 0
        self._manual_overrides = 0
        self._average_confidence = 0.0

    def record(self, kind: OutcomeKind, confidence: float) -> None:
        with self._lock:
            self._processed += 1
            self._counts[_COUNTER_FOR_KIND[kind]] += 1
            self._average_confidence += (confidence - self._average_confidence) / self._processed

    def record_manual_override(self) -> None:
        with self._lock:
            self._manual_overrides += 1

    def snapshot(self) -> BatchStats:
        with self._lock:
            return BatchStats(
                tasks_processed=self._processed,
                manual_overrides=self._manual_overrides,
                average_confidence=round(self._average_confidence, 2),
                **self._counts,
            )
