"""CLI package for imgst.

This package contains the Typer application.
"""

from imgst.cli.main import app

__all__ = ["app"]
