"""Core orchestration, settings and paths for imgst."""
