"""Parallel directory walker.

Walks the input tree on a thread pool and dispatches every eligible
file to a transformation task. Each directory listing runs as its own
job; a listing job submits one job per subdirectory and one task per
eligible file and hands the resulting futures back to the coordinating
thread, which drains them until nothing is pending. The walk therefore
only returns once every listing job and every task has completed.
"""

import logging
import os
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

from imgst.transform.base import Transformer
from imgst.walker.classifier import DEFAULT_EXTENSIONS, is_eligible
from imgst.walker.counters import RunTally, TallySnapshot
from imgst.walker.ignore import IgnoreRules
from imgst.walker.models import Entry
from imgst.walker.task import run_task

logger = logging.getLogger(__name__)

# A job hands back the futures of the work it spawned.
_Job = Future[list[Any]]


def resolve_num_threads(num_threads: int) -> int:
    """Resolve the configured worker count.

    Args:
        num_threads: Requested number of threads, 0 for automatic.

    Returns:
        Number of worker threads to start (at least 1).

    Raises:
        ValueError: If num_threads is negative.
    """
    if num_threads < 0:
        msg = f"Thread count cannot be negative, got {num_threads}"
        raise ValueError(msg)
    if num_threads == 0:
        return os.cpu_count() or 1
    return num_threads


class ParallelWalker:
    """Concurrent walk of an input tree with per-file dispatch.

    Symlinks are never followed and never counted. Hidden entries are
    included. Entries matched by ignore files are excluded from the walk
    entirely. Regular files are counted exactly once in the tally:
    ineligible files as skipped, eligible files by the outcome of their
    task. A directory or entry that cannot be read counts as one failure
    and the walk continues.

    Args:
        input_root: Existing directory to walk.
        output_root: Existing directory that receives the output tree.
        transformer: Transformer applied to each eligible file.
        tally: Shared counters updated by the workers.
        num_threads: Worker threads, 0 for one per CPU.
        dry_run: If True, simulate tasks without writing anything.
        extensions: Accepted extensions, normalized.
        respect_ignore_files: If False, ignore files are not consulted.
    """

    def __init__(
        self,
        input_root: Path,
        output_root: Path,
        transformer: Transformer,
        tally: RunTally,
        *,
        num_threads: int = 0,
        dry_run: bool = False,
        extensions: frozenset[str] = DEFAULT_EXTENSIONS,
        respect_ignore_files: bool = True,
    ) -> None:
        self._input_root = input_root
        self._output_root = output_root
        self._transformer = transformer
        self._tally = tally
        self._num_threads = resolve_num_threads(num_threads)
        self._dry_run = dry_run
        self._extensions = extensions
        self._respect_ignore_files = respect_ignore_files
        self._executor: ThreadPoolExecutor | None = None
        self._output_stat: os.stat_result | None = None

    @property
    def num_threads(self) -> int:
        return self._num_threads

    def run(self) -> TallySnapshot:
        """Walk the whole tree and wait for all dispatched work.

        Returns:
            Final snapshot of the tally.
        """
        rules = IgnoreRules.for_root(self._input_root, enabled=self._respect_ignore_files)
        try:
            self._output_stat = os.stat(self._output_root)
        except OSError:
            self._output_stat = None

        with ThreadPoolExecutor(
            max_workers=self._num_threads,
            thread_name_prefix="imgst-walker",
        ) as executor:
            self._executor = executor
            try:
                pending: deque[_Job] = deque(
                    [executor.submit(self._scan_directory, self._input_root, rules)]
                )
                while pending:
                    future = pending.popleft()
                    try:
                        pending.extend(future.result())
                    except Exception as e:  # noqa: BLE001 - keep draining the rest
                        self._tally.increment_failed()
                        logger.error("walk error: %s", e)
            finally:
                self._executor = None

        return self._tally.snapshot()

    def _submit(self, fn: Any, *args: Any) -> _Job:
        if self._executor is None:
            msg = "Walker is not running"
            raise RuntimeError(msg)
        return self._executor.submit(fn, *args)

    def _scan_directory(self, directory: Path, rules: IgnoreRules) -> list[_Job]:
        """List one directory and dispatch its children.

        Args:
            directory: Directory to list.
            rules: Ignore rules inherited from the parent directory.

        Returns:
            Futures of the jobs spawned for the directory's children.
        """
        if directory != self._input_root:
            rules = rules.child(directory)

        try:
            with os.scandir(directory) as it:
                dir_entries = list(it)
        except OSError as e:
            self._tally.increment_failed()
            logger.error("walk error: %s", e)
            return []

        spawned: list[_Job] = []
        for dir_entry in dir_entries:
            try:
                entry = Entry.from_dir_entry(dir_entry)
            except OSError as e:
                self._tally.increment_failed()
                logger.error("walk error: %s", e)
                continue

            if rules.is_ignored(entry.path, is_dir=entry.is_dir):
                logger.debug("ignored '%s'", entry.path)
                continue

            if entry.is_dir:
                if self._is_output_root(dir_entry):
                    logger.debug("skipping output directory '%s'", entry.path)
                    continue
                spawned.append(self._submit(self._scan_directory, entry.path, rules))
            elif entry.is_file:
                if is_eligible(entry, self._extensions):
                    spawned.append(self._submit(self._process_file, entry))
                else:
                    self._tally.increment_skipped()
            # Symlinks and special files are neither followed nor counted

        return spawned

    def _process_file(self, entry: Entry) -> list[_Job]:
        """Run the transformation task for one eligible file."""
        result = run_task(
            entry.path,
            self._input_root,
            self._output_root,
            self._transformer,
            dry_run=self._dry_run,
        )
        self._tally.record(result.outcome)
        return []

    def _is_output_root(self, dir_entry: os.DirEntry[str]) -> bool:
        """Check whether a directory entry is the output root itself.

        Compared by file identity, so an output root nested in the input
        tree is recognised however its path was spelled.
        """
        if self._output_stat is None:
            return False
        try:
            return os.path.samestat(dir_entry.stat(follow_symlinks=False), self._output_stat)
        except OSError:
            return False
