"""Concurrent directory tree scanner with a progress spinner and command line."""

__version__ = "0.1.0"
__all__ = ["cli", "progress", "scanner"]