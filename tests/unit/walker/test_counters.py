"""Unit tests for RunTally."""

import threading

from imgst.walker.counters import RunTally, TallySnapshot
from imgst.walker.models import TaskOutcome


class TestRunTally:
    """Tests for RunTally."""

    def test_starts_at_zero(self) -> None:
        tally = RunTally()
        assert tally.snapshot() == TallySnapshot(processed=0, skipped=0, failed=0)

    def test_record_dispatches_on_outcome(self) -> None:
        """record() increments the counter matching the outcome."""
        tally = RunTally()

        tally.record(TaskOutcome.PROCESSED)
        tally.record(TaskOutcome.PROCESSED)
        tally.record(TaskOutcome.SKIPPED)
        tally.record(TaskOutcome.FAILED)

        assert tally.processed == 2
        assert tally.skipped == 1
        assert tally.failed == 1

    def test_concurrent_increments_are_not_lost(self) -> None:
        """Increments from many threads all land."""
        tally = RunTally()
        per_thread = 2000
        thread_count = 8

        def work() -> None:
            for _ in range(per_thread):
                tally.increment_processed()
                tally.increment_skipped()
                tally.increment_failed()

        threads = [threading.Thread(target=work) for _ in range(thread_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = tally.snapshot()
        expected = per_thread * thread_count
        assert snapshot.processed == expected
        assert snapshot.skipped == expected
        assert snapshot.failed == expected
        assert snapshot.total == 3 * expected


class TestTallySnapshot:
    """Tests for TallySnapshot."""

    def test_total(self) -> None:
        assert TallySnapshot(processed=3, skipped=2, failed=1).total == 6

    def test_has_failures(self) -> None:
        assert TallySnapshot(failed=1).has_failures is True
        assert TallySnapshot(processed=5).has_failures is False
