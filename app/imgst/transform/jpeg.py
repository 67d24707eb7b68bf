"""JPEG metadata stripper.

By default the file is rewritten at the marker level: EXIF, XMP, ICC
profile, IPTC, comments and every other metadata segment are dropped
while the frame, table and scan data are copied byte for byte, so the
decoded pixels do not change. Only the EXIF Orientation tag is carried
over, in a minimal EXIF segment of its own, so rotated photos keep
displaying upright.

With a fixed quality the image is instead decoded, turned upright and
re-encoded by Pillow without any metadata. This is lossy.
"""

import io
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Literal

from PIL import Image, ImageOps

from imgst.transform.base import Transformer, TransformError
from imgst.transform.segments import APP1, build_segment, strip_metadata_segments

logger = logging.getLogger(__name__)

JpegQuality = int | Literal["keep"]

# Pillow reports multi-picture camera files as MPO
JPEG_FORMATS = frozenset({"JPEG", "MPO"})
ORIENTATION_TAG = 0x0112


def _orientation_segment(im: Image.Image) -> bytes | None:
    """Build an APP1 segment holding only the source's Orientation tag."""
    orientation = im.getexif().get(ORIENTATION_TAG)
    if not isinstance(orientation, int) or not 2 <= orientation <= 8:
        return None
    exif = Image.Exif()
    exif[ORIENTATION_TAG] = orientation
    return build_segment(APP1, exif.tobytes())


class JpegMetadataStripper(Transformer):
    """Writes metadata-free copies of JPEG files.

    The destination is written to a temporary file in the destination
    directory and renamed into place, so a failed or interrupted write
    never leaves a corrupt destination.

    Args:
        quality: ``"keep"`` for a lossless marker-level rewrite, or a
            JPEG quality between 1 and 95 to re-encode the image.
    """

    def __init__(self, quality: JpegQuality = "keep") -> None:
        if quality != "keep" and not (isinstance(quality, int) and 1 <= quality <= 95):
            msg = f"JPEG quality must be 'keep' or between 1 and 95, got {quality!r}"
            raise ValueError(msg)
        self._quality = quality

    @property
    def name(self) -> str:
        return "jpeg-metadata"

    @property
    def quality(self) -> JpegQuality:
        return self._quality

    @property
    def lossless(self) -> bool:
        return self._quality == "keep"

    def transform(self, source: Path, destination: Path) -> None:
        """Write a metadata-free copy of ``source`` to ``destination``.

        Args:
            source: JPEG file to read.
            destination: Path of the cleaned copy.

        Raises:
            TransformError: If the source is not a readable JPEG image or
                the destination cannot be written.
        """
        tmp_path: Path | None = None
        try:
            with Image.open(source) as im:
                if im.format not in JPEG_FORMATS:
                    msg = f"not a JPEG image (detected {im.format or 'unknown'})"
                    raise TransformError(msg)

                if self.lossless:
                    payload = self._strip(source, im)
                else:
                    payload = self._reencode(im)

            with NamedTemporaryFile(
                mode="wb",
                dir=destination.parent,
                prefix=f".{destination.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write(payload)

            os.replace(tmp_path, destination)
            tmp_path = None
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise TransformError(str(e) or e.__class__.__name__) from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        logger.debug("stripped metadata: '%s' -> '%s'", source, destination)

    def _strip(self, source: Path, im: Image.Image) -> bytes:
        """Rewrite the source file without its metadata segments."""
        extra = _orientation_segment(im)
        data = source.read_bytes()
        return strip_metadata_segments(data, extra_segments=[extra] if extra else [])

    def _reencode(self, im: Image.Image) -> bytes:
        """Decode, apply the orientation and encode without metadata."""
        im.load()
        progressive = bool(im.info.get("progressive") or im.info.get("progression"))

        upright = ImageOps.exif_transpose(im)
        # Pillow re-emits some metadata (e.g. comments) from im.info
        upright.info.clear()

        buf = io.BytesIO()
        upright.save(
            buf,
            format="JPEG",
            quality=self._quality,
            optimize=True,
            progressive=progressive,
        )
        return buf.getvalue()
