"""Eligibility check for discovered entries.

Classification is extension-based only. A misnamed file is accepted
here and fails later in the transformation step.
"""

from collections.abc import Iterable

from imgst.walker.models import Entry

# Extensions accepted by the JPEG metadata stripper (lowercase, no dot).
DEFAULT_EXTENSIONS: frozenset[str] = frozenset({"jpg", "jpeg"})


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lowercase extensions and strip leading dots.

    Args:
        extensions: Extensions such as ``"JPG"`` or ``".jpeg"``.

    Returns:
        Normalized set of extensions. Empty strings are dropped.
    """
    normalized = (ext.strip().lstrip(".").lower() for ext in extensions)
    return frozenset(ext for ext in normalized if ext)


def is_eligible(entry: Entry, extensions: frozenset[str] = DEFAULT_EXTENSIONS) -> bool:
    """Decide whether an entry should be transformed.

    Args:
        entry: Discovered filesystem entry.
        extensions: Accepted extensions, already normalized.

    Returns:
        True if the entry is a regular file with an accepted extension.
    """
    if not entry.is_file:
        return False

    suffix = entry.path.suffix
    if not suffix:
        return False

    return suffix[1:].lower() in extensions
