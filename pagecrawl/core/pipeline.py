"""
Pipeline coordinator – read URLs, fan out one fetch per line, drain.

By default every accepted line gets its own thread immediately, with no
cap on how many run at once.  Passing ``max_workers`` bounds concurrency
with a ``ThreadPoolExecutor`` instead; lines are then queued in the pool.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable

from pagecrawl.config import MAX_READ_ERRORS, QUIT_SENTINEL
from pagecrawl.utils.log import log


class Pipeline:
    """Dispatches *task* once per input line and waits for all of them."""

    def __init__(
        self,
        task: Callable[[str], object],
        max_workers: int | None = None,
    ) -> None:
        self.task = task
        self.max_workers = max_workers

    def run(self, lines: Iterable[str | bytes]) -> int:
        """Consume *lines* until ``quit`` or end of input, then block until
        every dispatched task has finished.  Returns the dispatch count."""
        if self.max_workers:
            with ThreadPoolExecutor(max_workers=self.max_workers,
                                    thread_name_prefix="fetch") as pool:
                dispatched = self._read(lines, lambda url: pool.submit(self._guarded, url))
                log.info("[INPUT] Input closed, draining %d task(s)", dispatched)
            return dispatched

        threads: list[threading.Thread] = []

        def _spawn(url: str) -> None:
            t = threading.Thread(target=self._guarded, args=(url,),
                                 name=f"fetch-{len(threads) + 1}")
            t.start()
            threads.append(t)

        try:
            dispatched = self._read(lines, _spawn)
            log.info("[INPUT] Input closed, draining %d task(s)", dispatched)
        finally:
            for t in threads:
                t.join()
        return dispatched

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self, lines: Iterable[str | bytes], dispatch: Callable[[str], object]) -> int:
        dispatched = 0
        lineno = 0
        read_errors = 0
        it = iter(lines)
        while True:
            lineno += 1
            try:
                raw = next(it)
            except StopIteration:
                break
            except OSError as exc:
                read_errors += 1
                log.error("[ERR] Cannot read input line %d: %s", lineno, exc)
                if read_errors >= MAX_READ_ERRORS:
                    log.error("[ERR] Input unreadable after %d consecutive errors, "
                              "stopping", read_errors)
                    break
                continue
            read_errors = 0

            line = self._decode(raw, lineno)
            if line is None:
                continue
            if line == QUIT_SENTINEL:
                log.info("[INPUT] Quit received on line %d", lineno)
                break
            if not line:
                log.debug("[INPUT] Skipping blank line %d", lineno)
                continue
            try:
                dispatch(line)
            except RuntimeError as exc:
                # Thread.start() / pool.submit() refuse new work
                log.error("[ERR] Cannot start task for %s: %s", line, exc)
                continue
            dispatched += 1
        return dispatched

    @staticmethod
    def _decode(raw: str | bytes, lineno: int) -> str | None:
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                log.error("[ERR] Cannot decode input line %d: %s", lineno, exc)
                return None
        return raw.rstrip("\r\n")

    def _guarded(self, url: str) -> None:
        # A task failure must never take down the pipeline or other tasks.
        try:
            self.task(url)
        except Exception:
            log.exception("[ERR] Unexpected failure while processing %s", url)
