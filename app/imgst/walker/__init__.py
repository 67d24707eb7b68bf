"""Parallel tree walk and per-file dispatch.

This module provides the walker, the file classifier, the path mapper,
the per-file transformation task, ignore-file rules and the shared
outcome counters.
"""

from imgst.walker.classifier import DEFAULT_EXTENSIONS, is_eligible, normalize_extensions
from imgst.walker.counters import RunTally, TallySnapshot
from imgst.walker.ignore import IgnoreRules
from imgst.walker.mapper import map_output_path
from imgst.walker.models import Entry, EntryType, MappedPath, TaskOutcome, TaskResult
from imgst.walker.task import run_task
from imgst.walker.walker import ParallelWalker, resolve_num_threads

__all__ = [
    "DEFAULT_EXTENSIONS",
    "Entry",
    "EntryType",
    "IgnoreRules",
    "MappedPath",
    "ParallelWalker",
    "RunTally",
    "TallySnapshot",
    "TaskOutcome",
    "TaskResult",
    "is_eligible",
    "map_output_path",
    "normalize_extensions",
    "resolve_num_threads",
    "run_task",
]
