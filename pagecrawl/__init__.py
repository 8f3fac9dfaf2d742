"""pagecrawl – fetch URLs from stdin and report the links each page holds."""

from pagecrawl.config import USER_AGENT, VERSION

__version__ = VERSION

__all__ = ["USER_AGENT", "VERSION", "__version__"]
