"""Abstract base class for file transformers.

This module defines the Transformer interface that the walker invokes
once per eligible file.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class TransformError(Exception):
    """Raised when a source file cannot be transformed."""


class Transformer(ABC):
    """Abstract base class for all file transformers.

    A transformer reads one source file and writes the transformed
    result to a destination path. On failure it raises TransformError
    and must not leave a partially written destination behind.

    Implementations are called concurrently from worker threads and
    must not keep per-call state on the instance.

    Example:
        >>> transformer = JpegMetadataStripper()
        >>> transformer.transform(Path("in/a.jpg"), Path("out/a.jpg"))
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short human-readable name for log messages."""

    @abstractmethod
    def transform(self, source: Path, destination: Path) -> None:
        """Transform ``source`` and write the result to ``destination``.

        The destination's parent directory already exists when this
        is called.

        Args:
            source: Absolute path of the file to read.
            destination: Absolute path of the file to write.

        Raises:
            TransformError: If the file cannot be transformed.
        """
