"""
Logging configuration for pagecrawl.

Console output is coloured with ``colorlog`` when it is installed; known
``[CATEGORY]`` tags are highlighted either way.  Every run also writes a
DEBUG-level log file named after the UTC start time.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

try:
    import colorlog
    _COLORLOG_AVAILABLE = True
except ImportError:
    _COLORLOG_AVAILABLE = False

log = logging.getLogger("pagecrawl")

_FILE_LOG_FMT = "%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s"
_FILE_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_ANSI_RESET = "\033[0m"
_CATEGORY_STYLES: dict[str, str] = {
    "[FETCH]": "\033[36m",
    "[OK]":    "\033[1;32m",
    "[ERR]":   "\033[1;31m",
    "[SINK]":  "\033[34m",
    "[INPUT]": "\033[33m",
    "[INFO]":  "\033[37m",
}


def _apply_category_styles(msg: str) -> str:
    for tag, style in _CATEGORY_STYLES.items():
        if tag in msg:
            msg = msg.replace(tag, f"{style}{tag}{_ANSI_RESET}")
    return msg


class _CategoryFormatter(logging.Formatter):
    """Formatter that highlights known ``[CATEGORY]`` tags."""

    def format(self, record: logging.LogRecord) -> str:
        return _apply_category_styles(super().format(record))


class _ColorlogCategoryFormatter(colorlog.ColoredFormatter if _COLORLOG_AVAILABLE else logging.Formatter):  # type: ignore[misc]
    def format(self, record: logging.LogRecord) -> str:
        return _apply_category_styles(super().format(record))


def log_file_path(directory: str | Path, name: str, when: datetime | None = None) -> Path:
    """Return ``<directory>/<name>-YYYY-MM-DD-HH-MM.log`` for *when* (UTC now
    by default)."""
    when = when or datetime.now(timezone.utc)
    return Path(directory) / f"{name}-{when:%Y-%m-%d-%H-%M}.log"


def setup_logging(debug: bool = False, log_file: str | Path | None = None) -> None:
    """Configure the ``pagecrawl`` logger.

    Parameters
    ----------
    debug : bool
        Enable DEBUG-level console output (default is INFO).
    log_file : str | Path | None
        If given, also write every message to this file.  The parent
        directory is created; an ``OSError`` here is left to the caller,
        since a run without its log file must not start.
    """
    log.setLevel(logging.DEBUG)
    log.handlers.clear()
    log.propagate = False

    if _COLORLOG_AVAILABLE:
        handler = colorlog.StreamHandler()
        handler.setFormatter(_ColorlogCategoryFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(message)s",
            datefmt="%H:%M:%S",
            log_colors={
                "DEBUG":    "cyan",
                "INFO":     "green",
                "WARNING":  "yellow",
                "ERROR":    "red",
                "CRITICAL": "bold_red",
            },
        ))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(_CategoryFormatter(
            "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
        ))
    handler.setLevel(logging.DEBUG if debug else logging.INFO)
    log.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_LOG_FMT, datefmt=_FILE_LOG_DATEFMT))
        log.addHandler(fh)
        log.info("Logging to file: %s", log_path.resolve())
