"""
Output sinks – where encoded Assets are delivered.

Each sink is shared by every worker thread and must tolerate concurrent
``write`` calls on its own.
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path

import requests

from pagecrawl.errors import SinkError
from pagecrawl.session import build_session
from pagecrawl.utils.log import log

# Terminator appended after each record in file sinks (JSON Lines)
RECORD_SEPARATOR = b"\n"


class Sink(ABC):
    """An output target accepting one encoded record per call."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Deliver *data*; return the number of bytes written.

        Raises :class:`SinkError` on failure.
        """

    def close(self) -> None:
        pass


class FileSink(Sink):
    """Append-only local file, one record per line.

    The file is opened once, in append mode, when the sink is built.  A lock
    serialises appends so records from different threads never interleave.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._fh = self.path.open("ab")
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"FileSink({str(self.path)!r})"

    def write(self, data: bytes) -> int:
        try:
            with self._lock:
                self._fh.write(data + RECORD_SEPARATOR)
                self._fh.flush()
        except (OSError, ValueError) as exc:
            raise SinkError(repr(self), str(exc)) from exc
        return len(data)

    def close(self) -> None:
        with self._lock:
            self._fh.close()


class HTTPSink(Sink):
    """POSTs each record to a remote collector.

    Every write is its own request; the response status is not inspected,
    only transport failures count as errors.
    """

    def __init__(
        self,
        url: str,
        from_header: str = "",
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or build_session(from_header)

    def __repr__(self) -> str:
        return f"HTTPSink({self.url!r})"

    def write(self, data: bytes) -> int:
        try:
            resp = self.session.post(self.url, data=data, timeout=self.timeout)
            resp.close()
        except requests.RequestException as exc:
            raise SinkError(repr(self), str(exc)) from exc
        log.debug("[SINK] POST %s -> %s", self.url, resp.status_code)
        return len(data)

    def close(self) -> None:
        self.session.close()


def open_sink(kind: str, target: str, from_header: str = "",
              timeout: float | None = None) -> Sink | None:
    """Build one sink of *kind* (``"file"`` or ``"url"``).

    Returns ``None`` (after logging) when a file sink cannot be opened.
    """
    if kind == "file":
        try:
            sink: Sink = FileSink(target)
        except OSError as exc:
            log.error("[ERR] Cannot open output file %s: %s", target, exc)
            return None
        log.info("[SINK] Appending records to %s", target)
        return sink
    if kind == "url":
        log.info("[SINK] Posting records to %s", target)
        return HTTPSink(target, from_header=from_header, timeout=timeout)
    raise ValueError(f"Unknown sink kind: {kind!r}")


def build_sinks(
    specs: list[tuple[str, str]],
    from_header: str = "",
    timeout: float | None = None,
) -> tuple[Sink, ...]:
    """Build the sink registration list from ``(kind, target)`` pairs,
    keeping their order and dropping file sinks that failed to open."""
    sinks = []
    for kind, target in specs:
        sink = open_sink(kind, target, from_header=from_header, timeout=timeout)
        if sink is not None:
            sinks.append(sink)
    return tuple(sinks)
