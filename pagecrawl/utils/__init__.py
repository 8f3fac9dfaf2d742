"""Logging helpers."""

from pagecrawl.utils.log import log, log_file_path, setup_logging

__all__ = [
    "log",
    "log_file_path",
    "setup_logging",
]
