"""Shared outcome accounting for a run.

A single RunTally is created per run and passed by reference to the
walker. Workers only ever increment it; totals are meaningful once the
walk has completed.
"""

import threading
from dataclasses import dataclass

from imgst.walker.models import TaskOutcome


@dataclass(frozen=True, slots=True)
class TallySnapshot:
    """Immutable copy of the run counters.

    Attributes:
        processed: Files transformed (or simulated in dry-run).
        skipped: Regular files that were not eligible.
        failed: Files or entries that could not be processed.
    """

    processed: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        """Total number of counted entries."""
        return self.processed + self.skipped + self.failed

    @property
    def has_failures(self) -> bool:
        """Check if at least one entry failed."""
        return self.failed > 0


class RunTally:
    """Thread-safe processed/skipped/failed counters.

    Each increment is guarded by a lock. There is no reset and no
    cross-counter consistency during a run.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processed = 0
        self._skipped = 0
        self._failed = 0

    def increment_processed(self) -> None:
        with self._lock:
            self._processed += 1

    def increment_skipped(self) -> None:
        with self._lock:
            self._skipped += 1

    def increment_failed(self) -> None:
        with self._lock:
            self._failed += 1

    def record(self, outcome: TaskOutcome) -> None:
        """Increment the counter matching an outcome.

        Args:
            outcome: Outcome of one unit of work.
        """
        if outcome == TaskOutcome.PROCESSED:
            self.increment_processed()
        elif outcome == TaskOutcome.SKIPPED:
            self.increment_skipped()
        else:
            self.increment_failed()

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def skipped(self) -> int:
        return self._skipped

    @property
    def failed(self) -> int:
        return self._failed

    def snapshot(self) -> TallySnapshot:
        """Return an immutable copy of the current counters."""
        with self._lock:
            return TallySnapshot(
                processed=self._processed,
                skipped=self._skipped,
                failed=self._failed,
            )
