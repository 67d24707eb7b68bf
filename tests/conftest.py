"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import shutil
import threading
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import pytest
from imgst.transform.base import Transformer, TransformError
from PIL import Image

# EXIF tags used by the sample images
EXIF_MAKE = 0x010F
EXIF_MODEL = 0x0110


def write_jpeg(
    path: Path,
    *,
    size: tuple[int, int] = (16, 12),
    with_metadata: bool = True,
) -> Path:
    """Write a small JPEG, optionally carrying EXIF data and a comment."""
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.new("RGB", size, color=(200, 40, 40))
    if with_metadata:
        exif = Image.Exif()
        exif[EXIF_MAKE] = "TestCam"
        exif[EXIF_MODEL] = "Model X"
        image.save(path, format="JPEG", exif=exif, comment=b"secret location")
    else:
        image.save(path, format="JPEG")
    return path


class FakeTransformer(Transformer):
    """Transformer that copies files and fails for selected base names."""

    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        self._fail_on = set(fail_on)
        self._lock = threading.Lock()
        self.calls: list[tuple[Path, Path]] = []

    @property
    def name(self) -> str:
        return "fake"

    def transform(self, source: Path, destination: Path) -> None:
        with self._lock:
            self.calls.append((source, destination))
        if source.name in self._fail_on:
            msg = f"injected failure for {source.name}"
            raise TransformError(msg)
        shutil.copyfile(source, destination)


@pytest.fixture
def make_transformer() -> Callable[..., FakeTransformer]:
    """Factory for FakeTransformer instances."""

    def _make(fail_on: Iterable[str] = ()) -> FakeTransformer:
        return FakeTransformer(fail_on=fail_on)

    return _make


@pytest.fixture
def make_jpeg() -> Callable[..., Path]:
    """Factory writing small JPEG files (see write_jpeg)."""
    return write_jpeg


@pytest.fixture
def image_tree(tmp_path: Path) -> Path:
    """Input tree with 3 JPEGs and 2 other files.

    Layout::

        in/a/b/c/img.jpg
        in/a/d/img2.jpg
        in/top.JPEG
        in/a/notes.txt
        in/a/b/archive.tar.gz
    """
    root = tmp_path / "in"
    write_jpeg(root / "a" / "b" / "c" / "img.jpg")
    write_jpeg(root / "a" / "d" / "img2.jpg")
    write_jpeg(root / "top.JPEG")
    (root / "a" / "notes.txt").write_text("notes")
    (root / "a" / "b" / "archive.tar.gz").write_bytes(b"\x1f\x8b")
    return root


@pytest.fixture(autouse=True)
def _restore_imgst_logger() -> Iterator[None]:
    """Drop handlers and levels installed on the imgst logger by a test."""
    logger = logging.getLogger("imgst")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
