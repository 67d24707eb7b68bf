"""Mapping of source paths into the output tree."""

from pathlib import Path

from imgst.walker.models import MappedPath


def map_output_path(input_root: Path, output_root: Path, path: Path) -> MappedPath:
    """Compute the destination of a source file.

    The relative layout below ``input_root`` is kept as-is. Paths that are
    not under ``input_root`` fall back to their base name directly below
    ``output_root``, flagged as degraded since different sources can end
    up at the same destination. No I/O is performed.

    Args:
        input_root: Root of the input tree.
        output_root: Root of the output tree.
        path: Absolute source path.

    Returns:
        MappedPath with the destination and the degraded flag.

    Raises:
        ValueError: If the fallback is needed and the path has no base name.
    """
    try:
        relative = path.relative_to(input_root)
    except ValueError:
        if not path.name:
            msg = f"Cannot map path without a file name: {path}"
            raise ValueError(msg) from None
        return MappedPath(destination=output_root / path.name, degraded=True)

    return MappedPath(destination=output_root / relative)
