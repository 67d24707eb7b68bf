"""Marker-level JPEG rewriting.

A JPEG file is a sequence of marker segments with entropy-coded scan
data after each SOS segment. Metadata lives in APPn and COM segments,
so it can be removed by copying every other segment and all scan data
byte for byte. The decoded pixels of the result are identical to those
of the source.

Only the primary image is kept: anything after its EOI marker (for
example the secondary images of an MPO file) is dropped together with
the APP2 index that referenced it.
"""

from collections.abc import Iterable

MARKER_PREFIX = 0xFF
SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
APP0 = 0xE0
APP1 = 0xE1
APP14 = 0xEE
APP15 = 0xEF
COM = 0xFE


class SegmentError(ValueError):
    """Raised when a JPEG stream is malformed or truncated."""


def _is_standalone(marker: int) -> bool:
    """Markers without a length field (TEM and RST0-RST7)."""
    return marker == 0x01 or 0xD0 <= marker <= 0xD7


def _keep_segment(marker: int, payload: bytes) -> bool:
    """Decide whether a marker segment survives the rewrite.

    APP0 is kept only for the JFIF header (JFXX thumbnails are dropped)
    and APP14 only for the Adobe color transform flag. All other APPn
    segments and comments are metadata.
    """
    if marker == COM:
        return False
    if marker == APP0:
        return payload.startswith(b"JFIF\x00")
    if marker == APP14:
        return payload.startswith(b"Adobe")
    return not APP0 <= marker <= APP15


def _scan_data_end(data: bytes, pos: int) -> int:
    """Find the offset of the first marker after entropy-coded data.

    Stuffed bytes (FF 00) and restart markers belong to the scan data.
    """
    while True:
        index = data.find(b"\xff", pos)
        if index == -1 or index + 1 >= len(data):
            msg = "image data ends without an end-of-image marker"
            raise SegmentError(msg)
        following = data[index + 1]
        if following == 0x00 or 0xD0 <= following <= 0xD7:
            pos = index + 2
            continue
        return index


def build_segment(marker: int, payload: bytes) -> bytes:
    """Encode a marker segment with its big-endian length field."""
    length = len(payload) + 2
    if length > 0xFFFF:
        msg = f"segment payload too large ({len(payload)} bytes)"
        raise SegmentError(msg)
    return bytes((MARKER_PREFIX, marker)) + length.to_bytes(2, "big") + payload


def strip_metadata_segments(data: bytes, extra_segments: Iterable[bytes] = ()) -> bytes:
    """Copy a JPEG stream without its metadata segments.

    Args:
        data: Complete JPEG file contents.
        extra_segments: Encoded segments to insert after the JFIF header
            (or directly after SOI when there is none).

    Returns:
        The rewritten JPEG stream.

    Raises:
        SegmentError: If the stream is not a well-formed JPEG.
    """
    if data[:2] != bytes((MARKER_PREFIX, SOI)):
        msg = "missing start-of-image marker"
        raise SegmentError(msg)

    out: list[bytes] = [data[:2]]
    size = len(data)
    pos = 2
    seen_scan = False

    while True:
        if pos >= size or data[pos] != MARKER_PREFIX:
            msg = f"expected a marker at offset {pos}"
            raise SegmentError(msg)
        # Any number of fill bytes may precede a marker
        while pos < size and data[pos] == MARKER_PREFIX:
            pos += 1
        if pos >= size:
            msg = "stream ends inside a marker"
            raise SegmentError(msg)

        marker = data[pos]
        pos += 1

        if marker == EOI:
            if not seen_scan:
                msg = "no image data before end-of-image marker"
                raise SegmentError(msg)
            out.append(bytes((MARKER_PREFIX, EOI)))
            break
        if _is_standalone(marker):
            out.append(bytes((MARKER_PREFIX, marker)))
            continue

        if pos + 2 > size:
            msg = f"truncated segment 0x{marker:02X} at offset {pos - 2}"
            raise SegmentError(msg)
        length = int.from_bytes(data[pos : pos + 2], "big")
        end = pos + length
        if length < 2 or end > size:
            msg = f"truncated segment 0x{marker:02X} at offset {pos - 2}"
            raise SegmentError(msg)

        if _keep_segment(marker, data[pos + 2 : end]):
            out.append(bytes((MARKER_PREFIX, marker)) + data[pos:end])
        pos = end

        if marker == SOS:
            seen_scan = True
            scan_end = _scan_data_end(data, pos)
            out.append(data[pos:scan_end])
            pos = scan_end

    extras = list(extra_segments)
    if extras:
        at = 2 if len(out) > 1 and out[1][1] == APP0 else 1
        out[at:at] = extras
    return b"".join(out)
