"""Run orchestration.

The RunController validates the input and output roots, runs the
parallel walker to completion and turns the final tally into a
RunReport with an exit status. It moves through the states
VALIDATING -> RUNNING -> REPORTING -> DONE; only a configuration
error stops it before the walk starts.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from imgst.transform.base import Transformer
from imgst.walker.classifier import DEFAULT_EXTENSIONS
from imgst.walker.counters import RunTally, TallySnapshot
from imgst.walker.walker import ParallelWalker

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


class ConfigurationError(Exception):
    """Raised when the input or output root is unusable."""


class RunState(str, Enum):
    """Lifecycle state of a RunController."""

    VALIDATING = "validating"
    RUNNING = "running"
    REPORTING = "reporting"
    DONE = "done"


class RunStatus(str, Enum):
    """Overall result of a completed run.

    Attributes:
        SUCCESS: Every eligible file was processed.
        COMPLETED_WITH_FAILURES: The walk completed but some entries failed.
    """

    SUCCESS = "success"
    COMPLETED_WITH_FAILURES = "completed_with_failures"


@dataclass(frozen=True, slots=True)
class RunReport:
    """Summary of a completed run.

    Attributes:
        tally: Final counters.
        status: Overall result.
        dry_run: Whether the run was simulated.
    """

    tally: TallySnapshot
    status: RunStatus
    dry_run: bool = False

    @property
    def success(self) -> bool:
        """Check if the run completed without failures."""
        return self.status == RunStatus.SUCCESS

    @property
    def exit_code(self) -> int:
        """Process exit code for this run."""
        return EXIT_SUCCESS if self.success else EXIT_FAILURES


class RunController:
    """Validates roots, runs the walk and reports the outcome.

    Args:
        input_root: Directory to read from. Must exist.
        output_root: Directory to write to. Created if missing.
        transformer: Transformer applied to each eligible file.
        num_threads: Worker threads, 0 for automatic.
        dry_run: If True, simulate without writing any output file.
        extensions: Accepted extensions, normalized.
        respect_ignore_files: Honour ignore files during the walk.
    """

    def __init__(
        self,
        input_root: Path,
        output_root: Path,
        transformer: Transformer,
        *,
        num_threads: int = 0,
        dry_run: bool = False,
        extensions: frozenset[str] = DEFAULT_EXTENSIONS,
        respect_ignore_files: bool = True,
    ) -> None:
        self._input_root = input_root.absolute()
        self._output_root = output_root.absolute()
        self._transformer = transformer
        self._num_threads = num_threads
        self._dry_run = dry_run
        self._extensions = extensions
        self._respect_ignore_files = respect_ignore_files
        self._state = RunState.VALIDATING

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def input_root(self) -> Path:
        return self._input_root

    @property
    def output_root(self) -> Path:
        return self._output_root

    def validate(self) -> None:
        """Check the input root and make sure the output root exists.

        Raises:
            ConfigurationError: If the input root is not a directory, or the
                output root is not a directory and cannot be created.
        """
        if not self._input_root.is_dir():
            msg = f"input path '{self._input_root}' is not a directory"
            raise ConfigurationError(msg)

        if self._output_root.exists() and not self._output_root.is_dir():
            msg = f"output path '{self._output_root}' exists but is not a directory"
            raise ConfigurationError(msg)

        try:
            self._output_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"failed to create output dir '{self._output_root}': {e}"
            raise ConfigurationError(msg) from e

    def run(self) -> RunReport:
        """Execute the full run.

        Returns:
            RunReport with the final tally and status.

        Raises:
            ConfigurationError: If validation fails. Nothing is walked then.
        """
        self._state = RunState.VALIDATING
        self.validate()

        tally = RunTally()
        walker = ParallelWalker(
            self._input_root,
            self._output_root,
            self._transformer,
            tally,
            num_threads=self._num_threads,
            dry_run=self._dry_run,
            extensions=self._extensions,
            respect_ignore_files=self._respect_ignore_files,
        )

        logger.info("input directory: %s", self._input_root)
        logger.info("output directory: %s", self._output_root)
        logger.info("threads: %d", walker.num_threads)
        if self._dry_run:
            logger.info("running in DRY_RUN mode")

        self._state = RunState.RUNNING
        snapshot = walker.run()

        self._state = RunState.REPORTING
        report = self._report(snapshot)

        self._state = RunState.DONE
        return report

    def _report(self, snapshot: TallySnapshot) -> RunReport:
        logger.info(
            "done: processed=%d skipped=%d failed=%d",
            snapshot.processed,
            snapshot.skipped,
            snapshot.failed,
        )

        if snapshot.has_failures:
            logger.warning("some files failed to process")
            status = RunStatus.COMPLETED_WITH_FAILURES
        else:
            status = RunStatus.SUCCESS

        return RunReport(tally=snapshot, status=status, dry_run=self._dry_run)
