"""
Configuration constants and settings loading for pagecrawl.
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path

from pagecrawl.errors import ConfigError

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
VERSION = "0.1.0"
USER_AGENT = f"pagecrawl; {VERSION}"

# Input line that stops further reading
QUIT_SENTINEL = "quit"

# Consecutive input read errors after which the stream is treated as dead
MAX_READ_ERRORS = 5

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_CONFIG_FILE = "pagecrawl-config.ini"
DEFAULT_LOG_PATH = "."
DEFAULT_LOG_NAME = "pagecrawl"
DEFAULT_FROM = ""

# HTTP connection pool sizing; connections beyond POOL_MAXSIZE are still
# opened but discarded after use
POOL_CONNECTIONS = 20
POOL_MAXSIZE = 64

# Environment overrides for the INI values
ENV_FROM = "PAGECRAWL_FROM"
ENV_LOG_PATH = "PAGECRAWL_LOG_PATH"


@dataclass(frozen=True)
class Settings:
    """Values read from the INI file (or their defaults)."""

    log_path: str = DEFAULT_LOG_PATH
    log_name: str = DEFAULT_LOG_NAME
    from_header: str = DEFAULT_FROM


@dataclass(frozen=True)
class PipelineConfig:
    """Resolved run-wide configuration handed to the fetcher and pipeline.

    ``sinks`` keeps registration order; it is a tuple so every worker
    thread can read it without locking.
    """

    from_header: str = DEFAULT_FROM
    cache: bool = False
    sinks: tuple = field(default_factory=tuple)
    timeout: float | None = None
    max_workers: int | None = None


def load_settings(path: str | Path = DEFAULT_CONFIG_FILE) -> Settings:
    """Read ``[Log]`` and ``[Network]`` values from the INI file at *path*.

    A missing file yields the defaults.  A file that exists but cannot be
    parsed raises :class:`ConfigError`.  ``PAGECRAWL_FROM`` and
    ``PAGECRAWL_LOG_PATH`` take precedence over the file.
    """
    parser = configparser.ConfigParser()
    config_path = Path(path)
    if config_path.is_file():
        try:
            with config_path.open(encoding="utf-8") as fh:
                parser.read_file(fh)
        except (configparser.Error, OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    log_path = parser.get("Log", "Path", fallback=DEFAULT_LOG_PATH)
    log_name = parser.get("Log", "Name", fallback=DEFAULT_LOG_NAME)
    from_header = parser.get("Network", "From", fallback=DEFAULT_FROM)

    return Settings(
        log_path=os.environ.get(ENV_LOG_PATH, log_path),
        log_name=log_name,
        from_header=os.environ.get(ENV_FROM, from_header),
    )
