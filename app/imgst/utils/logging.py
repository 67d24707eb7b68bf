"""Logging setup for the imgst command line.

Log records of the ``imgst`` package are written to stderr as one
level-tagged line per event, e.g. ``[INFO]: done: processed=3 ...``.
"""

import logging
import os
import sys

LOGGER_NAME = "imgst"
LOG_ENV_VAR = "IMGST_LOG"
LOG_FORMAT = "[%(levelname)s]: %(message)s"

# Marks the handler installed by configure_logging so it can be replaced
_HANDLER_ATTR = "_imgst_handler"


def resolve_level(verbose: int = 0, quiet: bool = False) -> int:
    """Determine the log level from the environment and CLI flags.

    A valid level name in ``IMGST_LOG`` (e.g. ``debug``) takes precedence.
    Otherwise ``quiet`` selects WARNING, any ``verbose`` count selects
    DEBUG and the default is INFO.

    Args:
        verbose: Number of -v flags given.
        quiet: Whether -q was given.

    Returns:
        Logging level constant.
    """
    env_level = os.environ.get(LOG_ENV_VAR)
    if env_level:
        level = logging.getLevelName(env_level.strip().upper())
        if isinstance(level, int):
            return level

    if quiet:
        return logging.WARNING
    if verbose > 0:
        return logging.DEBUG
    return logging.INFO


def configure_logging(verbose: int = 0, quiet: bool = False) -> logging.Logger:
    """Install the stderr handler on the imgst logger.

    Calling this again replaces the previously installed handler.

    Args:
        verbose: Number of -v flags given.
        quiet: Whether -q was given.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(resolve_level(verbose, quiet))
    return logger
