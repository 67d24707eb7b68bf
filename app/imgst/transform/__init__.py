"""File transformers applied to eligible files."""

from imgst.transform.base import Transformer, TransformError
from imgst.transform.jpeg import JpegMetadataStripper
from imgst.transform.segments import SegmentError, strip_metadata_segments

__all__ = [
    "JpegMetadataStripper",
    "SegmentError",
    "TransformError",
    "Transformer",
    "strip_metadata_segments",
]
