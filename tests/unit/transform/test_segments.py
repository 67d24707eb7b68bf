"""Unit tests for marker-level JPEG rewriting.

Uses small hand-built marker streams; the decoder never sees them.
"""

import pytest
from imgst.transform.segments import (
    APP0,
    APP1,
    APP14,
    COM,
    SOS,
    SegmentError,
    build_segment,
    strip_metadata_segments,
)

SOI = b"\xff\xd8"
EOI = b"\xff\xd9"
DQT = 0xDB
DHT = 0xC4
SOF0 = 0xC0

JFIF = build_segment(APP0, b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00")
EXIF = build_segment(APP1, b"Exif\x00\x00MM\x00*secret")
XMP = build_segment(APP1, b"http://ns.adobe.com/xap/1.0/\x00<x:xmpmeta/>")
ICC = build_segment(0xE2, b"ICC_PROFILE\x00\x01\x01profile")
IPTC = build_segment(0xED, b"Photoshop 3.0\x00caption")
COMMENT = build_segment(COM, b"shot at home")
TABLES = build_segment(DQT, b"\x00" + bytes(range(64)))
FRAME = build_segment(SOF0, b"\x08\x00\x10\x00\x10\x01\x01\x11\x00")
HUFFMAN = build_segment(DHT, b"\x00" + b"\x01" * 16 + b"\x00")
SCAN = build_segment(SOS, b"\x01\x01\x00\x00\x3f\x00")
# Entropy-coded data with a stuffed byte and a restart marker
SCAN_DATA = b"\x12\x34\xff\x00\x56\xff\xd0\x78\x9a"


def _image(*segments: bytes) -> bytes:
    return SOI + b"".join(segments) + EOI


class TestStripMetadataSegments:
    """Tests for strip_metadata_segments."""

    def test_drops_metadata_keeps_structure(self) -> None:
        data = _image(
            JFIF, EXIF, XMP, ICC, IPTC, COMMENT, TABLES, FRAME, HUFFMAN, SCAN, SCAN_DATA
        )

        result = strip_metadata_segments(data)

        assert result == _image(JFIF, TABLES, FRAME, HUFFMAN, SCAN, SCAN_DATA)

    def test_scan_data_copied_verbatim(self) -> None:
        """Stuffed bytes and restart markers are part of the scan data."""
        data = _image(FRAME, SCAN, SCAN_DATA)

        result = strip_metadata_segments(data)

        assert SCAN_DATA in result
        assert result.endswith(SCAN_DATA + EOI)

    def test_keeps_adobe_segment(self) -> None:
        adobe = build_segment(APP14, b"Adobe\x00\x64\x00\x00\x00\x00\x01")
        data = _image(adobe, FRAME, SCAN, SCAN_DATA)

        assert strip_metadata_segments(data) == data

    def test_drops_jfxx_thumbnail(self) -> None:
        thumbnail = build_segment(APP0, b"JFXX\x00\x10thumbnail")
        data = _image(JFIF, thumbnail, FRAME, SCAN, SCAN_DATA)

        assert strip_metadata_segments(data) == _image(JFIF, FRAME, SCAN, SCAN_DATA)

    def test_multiple_scans(self) -> None:
        """Progressive streams interleave tables and comments between scans."""
        data = _image(
            FRAME, HUFFMAN, SCAN, SCAN_DATA, HUFFMAN, COMMENT, SCAN, b"\x01\x02"
        )

        result = strip_metadata_segments(data)

        assert result == _image(FRAME, HUFFMAN, SCAN, SCAN_DATA, HUFFMAN, SCAN, b"\x01\x02")

    def test_fill_bytes_before_marker(self) -> None:
        data = SOI + b"\xff" + FRAME + SCAN + SCAN_DATA + b"\xff" + EOI

        assert strip_metadata_segments(data) == _image(FRAME, SCAN, SCAN_DATA)

    def test_trailing_data_dropped(self) -> None:
        """Anything after the first image (e.g. MPO secondary images) is dropped."""
        secondary = _image(EXIF, FRAME, SCAN, SCAN_DATA)
        data = _image(FRAME, SCAN, SCAN_DATA) + secondary

        assert strip_metadata_segments(data) == _image(FRAME, SCAN, SCAN_DATA)

    def test_extra_segments_after_jfif(self) -> None:
        extra = build_segment(APP1, b"Exif\x00\x00orientation")
        data = _image(JFIF, EXIF, FRAME, SCAN, SCAN_DATA)

        result = strip_metadata_segments(data, extra_segments=[extra])

        assert result == _image(JFIF, extra, FRAME, SCAN, SCAN_DATA)

    def test_extra_segments_without_jfif(self) -> None:
        extra = build_segment(APP1, b"Exif\x00\x00orientation")
        data = _image(EXIF, FRAME, SCAN, SCAN_DATA)

        result = strip_metadata_segments(data, extra_segments=[extra])

        assert result == _image(extra, FRAME, SCAN, SCAN_DATA)


class TestMalformedStreams:
    """Tests for rejected input."""

    def test_missing_start_marker(self) -> None:
        with pytest.raises(SegmentError, match="start-of-image"):
            strip_metadata_segments(b"GIF89a" + FRAME)

    def test_truncated_segment(self) -> None:
        data = SOI + FRAME + SCAN[:4]

        with pytest.raises(SegmentError, match="truncated segment"):
            strip_metadata_segments(data)

    def test_missing_end_marker(self) -> None:
        data = SOI + FRAME + SCAN + SCAN_DATA

        with pytest.raises(SegmentError, match="end-of-image"):
            strip_metadata_segments(data)

    def test_no_scan(self) -> None:
        with pytest.raises(SegmentError, match="no image data"):
            strip_metadata_segments(_image(JFIF, FRAME))

    def test_garbage_between_segments(self) -> None:
        data = SOI + FRAME + b"\x00\x00" + SCAN + SCAN_DATA + EOI

        with pytest.raises(SegmentError, match="expected a marker"):
            strip_metadata_segments(data)

    def test_segment_error_is_value_error(self) -> None:
        assert issubclass(SegmentError, ValueError)


class TestBuildSegment:
    """Tests for build_segment."""

    def test_length_includes_length_field(self) -> None:
        assert build_segment(COM, b"abc") == b"\xff\xfe\x00\x05abc"

    def test_rejects_oversized_payload(self) -> None:
        with pytest.raises(SegmentError, match="too large"):
            build_segment(COM, b"x" * 0xFFFE)
