"""Allow running imgst as ``python -m imgst``."""

from imgst.cli.main import app

app()
