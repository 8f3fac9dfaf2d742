"""Exception types raised by pagecrawl."""


class PageCrawlError(Exception):
    """Base class for all pagecrawl errors."""


class ConfigError(PageCrawlError):
    """The configuration file exists but could not be read."""


class SinkError(PageCrawlError):
    """An output sink failed to accept a record."""

    def __init__(self, sink: str, reason: str) -> None:
        super().__init__(f"{sink}: {reason}")
        self.sink = sink
        self.reason = reason
