"""Per-file transformation task.

A task turns one eligible source file into exactly one TaskResult.
Errors never escape a task: they are logged and reported as a FAILED
result, so one bad file has no effect on any other.
"""

import logging
from pathlib import Path

from imgst.transform.base import Transformer
from imgst.walker.mapper import map_output_path
from imgst.walker.models import TaskOutcome, TaskResult

logger = logging.getLogger(__name__)


def run_task(
    source: Path,
    input_root: Path,
    output_root: Path,
    transformer: Transformer,
    dry_run: bool = False,
) -> TaskResult:
    """Transform a single eligible file into the output tree.

    In dry-run mode nothing is written and the transformer is not
    called; the task only computes the destination and reports it as
    processed. A dry-run therefore does not prove that a live run of
    the same file would succeed.

    Args:
        source: Absolute path of the eligible source file.
        input_root: Root of the input tree.
        output_root: Root of the output tree.
        transformer: Transformer to apply in live mode.
        dry_run: If True, simulate the transformation.

    Returns:
        TaskResult with outcome PROCESSED or FAILED.
    """
    destination: Path | None = None
    try:
        mapped = map_output_path(input_root, output_root, source)
        destination = mapped.destination

        if mapped.degraded:
            logger.warning(
                "'%s' is not under input root '%s', writing to '%s' (may collide)",
                source,
                input_root,
                destination,
            )

        if dry_run:
            logger.debug("dry-run: would clean '%s' -> '%s'", source, destination)
            return TaskResult(
                source=source,
                outcome=TaskOutcome.PROCESSED,
                destination=destination,
                dry_run=True,
            )

        destination.parent.mkdir(parents=True, exist_ok=True)
        transformer.transform(source, destination)

    except Exception as e:  # noqa: BLE001 - a task must never raise
        error = str(e) or e.__class__.__name__
        logger.error("failed to process '%s': %s", source, error)
        return TaskResult(
            source=source,
            outcome=TaskOutcome.FAILED,
            destination=destination,
            error=error,
            dry_run=dry_run,
        )

    logger.debug("cleaned '%s' -> '%s'", source, destination)
    return TaskResult(source=source, outcome=TaskOutcome.PROCESSED, destination=destination)
