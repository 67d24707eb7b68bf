"""Utility modules for imgst.

This module exports commonly used utility functions.
"""

from imgst.utils.formatting import (
    console,
    err_console,
    print_error,
    print_success,
)
from imgst.utils.logging import configure_logging

__all__ = [
    "configure_logging",
    "console",
    "err_console",
    "print_error",
    "print_success",
]
