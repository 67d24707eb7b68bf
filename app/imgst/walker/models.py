"""Walker domain models.

This module defines the data structures passed between the parallel
walker, the file classifier, the path mapper and the per-file
transformation task.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EntryType(str, Enum):
    """Type of a discovered filesystem entry.

    Symlinks are reported as such and never resolved.

    Attributes:
        FILE: Regular file.
        DIRECTORY: Directory.
        SYMLINK: Symbolic link (to anything, live or dead).
        OTHER: Sockets, FIFOs, device nodes and the like.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


class TaskOutcome(str, Enum):
    """Terminal classification of one file's processing attempt.

    Attributes:
        PROCESSED: The transformation (or its dry-run simulation) completed.
        SKIPPED: The file was not eligible for transformation.
        FAILED: The file was eligible but could not be transformed, or the
            entry could not be read at all.
    """

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Entry:
    """A filesystem node discovered during the walk.

    Attributes:
        path: Absolute path of the entry.
        entry_type: Type of the entry, determined without following symlinks.
    """

    path: Path
    entry_type: EntryType

    @property
    def is_file(self) -> bool:
        """Check if this entry is a regular file."""
        return self.entry_type == EntryType.FILE

    @property
    def is_dir(self) -> bool:
        """Check if this entry is a directory."""
        return self.entry_type == EntryType.DIRECTORY

    @classmethod
    def from_dir_entry(cls, dir_entry: os.DirEntry[str]) -> "Entry":
        """Build an Entry from an ``os.scandir`` result.

        Symlinks are checked first, because ``is_dir`` and ``is_file``
        would otherwise report on the link target.

        Args:
            dir_entry: Entry produced by ``os.scandir``.

        Returns:
            Entry with the detected type.

        Raises:
            OSError: If the entry type cannot be determined.
        """
        if dir_entry.is_symlink():
            entry_type = EntryType.SYMLINK
        elif dir_entry.is_dir(follow_symlinks=False):
            entry_type = EntryType.DIRECTORY
        elif dir_entry.is_file(follow_symlinks=False):
            entry_type = EntryType.FILE
        else:
            entry_type = EntryType.OTHER
        return cls(path=Path(dir_entry.path), entry_type=entry_type)


@dataclass(frozen=True, slots=True)
class MappedPath:
    """Destination computed for a source file.

    Attributes:
        destination: Absolute destination path under the output root.
        degraded: True if the source was not under the input root and the
            base-name fallback was used. Such destinations may collide.
    """

    destination: Path
    degraded: bool = False


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Result of processing a single file.

    Attributes:
        source: Absolute source path that was processed.
        outcome: Terminal outcome of the attempt.
        destination: Destination path, None if it could not be computed.
        error: Error message if the attempt failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing written).
    """

    source: Path
    outcome: TaskOutcome
    destination: Path | None = None
    error: str | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        """Check if the file was processed."""
        return self.outcome == TaskOutcome.PROCESSED

    @property
    def failed(self) -> bool:
        """Check if the attempt failed."""
        return self.outcome == TaskOutcome.FAILED
