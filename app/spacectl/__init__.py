"""spacectl - Reclaim disk space from caches, logs and temp files."""

__version__ = "0.1.0"
