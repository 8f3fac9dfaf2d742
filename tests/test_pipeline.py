"""
Tests for the pipeline coordinator: dispatch, quit handling and draining.
"""

import io
import threading
import time
import unittest
from unittest.mock import patch

from pagecrawl.core.pipeline import Pipeline


class _Recorder:
    """Task stub that records every URL after an optional delay."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.started: list[str] = []
        self.finished: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str) -> None:
        with self._lock:
            self.started.append(url)
        if self.delay:
            time.sleep(self.delay)
        with self._lock:
            self.finished.append(url)


class _FlakyStream:
    """Line iterator that raises any exception instance found in *items*."""

    def __init__(self, items) -> None:
        self.items = list(items)
        self.pos = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self.pos >= len(self.items):
            raise StopIteration
        item = self.items[self.pos]
        self.pos += 1
        if isinstance(item, Exception):
            raise item
        return item


class TestPipeline(unittest.TestCase):
    def test_stops_at_quit(self):
        task = _Recorder()
        lines = ["https://a.example/\n", "https://b.example/\n", "quit\n",
                 "https://c.example/\n"]
        dispatched = Pipeline(task).run(lines)
        self.assertEqual(dispatched, 2)
        self.assertEqual(sorted(task.started), ["https://a.example/", "https://b.example/"])

    def test_end_of_input_drains(self):
        task = _Recorder()
        self.assertEqual(Pipeline(task).run(["u1", "u2", "u3"]), 3)
        self.assertEqual(len(task.finished), 3)

    def test_blocks_until_all_tasks_complete(self):
        task = _Recorder(delay=0.2)
        lines = [f"https://example.com/{i}\n" for i in range(20)] + ["quit\n"]
        t0 = time.monotonic()
        dispatched = Pipeline(task).run(lines)
        elapsed = time.monotonic() - t0
        self.assertEqual(dispatched, 20)
        self.assertEqual(len(task.finished), 20)
        # one thread per line, so the delays overlap
        self.assertLess(elapsed, 0.2 * 20)

    def test_lines_after_quit_are_not_read(self):
        consumed = []

        def _lines():
            for line in ["a\n", "quit\n", "b\n"]:
                consumed.append(line)
                yield line

        Pipeline(_Recorder()).run(_lines())
        self.assertEqual(consumed, ["a\n", "quit\n"])

    def test_quit_must_match_exactly(self):
        task = _Recorder()
        Pipeline(task).run(["QUIT\n", " quit\n", "quit \n"])
        self.assertEqual(len(task.started), 3)

    def test_crlf_stripped(self):
        task = _Recorder()
        Pipeline(task).run(["https://a.example/\r\n", "quit\r\n", "b\n"])
        self.assertEqual(task.started, ["https://a.example/"])

    def test_blank_lines_skipped(self):
        task = _Recorder()
        self.assertEqual(Pipeline(task).run(["\n", "u\n", "\n"]), 1)

    def test_binary_stream_and_bad_encoding(self):
        task = _Recorder()
        stream = io.BytesIO(b"https://a.example/\n\xff\xfe\nhttps://b.example/\nquit\n")
        with self.assertLogs("pagecrawl", level="ERROR"):
            dispatched = Pipeline(task).run(stream)
        self.assertEqual(dispatched, 2)
        self.assertEqual(sorted(task.started), ["https://a.example/", "https://b.example/"])

    def test_task_exception_does_not_escape(self):
        seen = []

        def _task(url):
            seen.append(url)
            raise RuntimeError("boom")

        with self.assertLogs("pagecrawl", level="ERROR"):
            dispatched = Pipeline(_task).run(["a", "b"])
        self.assertEqual(dispatched, 2)
        self.assertEqual(sorted(seen), ["a", "b"])

    def test_read_error_skips_line_and_drains(self):
        task = _Recorder(delay=0.3)
        stream = _FlakyStream([b"https://a.example/\n", OSError("EIO"),
                               b"https://b.example/\n", b"quit\n"])
        with self.assertLogs("pagecrawl", level="ERROR") as cm:
            dispatched = Pipeline(task).run(stream)
        self.assertEqual(dispatched, 2)
        self.assertEqual(sorted(task.finished), ["https://a.example/", "https://b.example/"])
        self.assertIn("EIO", "\n".join(cm.output))

    def test_dead_stream_stops_reading_and_drains(self):
        task = _Recorder(delay=0.3)
        stream = _FlakyStream([b"https://a.example/\n"] + [OSError("EIO")] * 100)
        with self.assertLogs("pagecrawl", level="ERROR"):
            dispatched = Pipeline(task).run(stream)
        self.assertEqual(dispatched, 1)
        self.assertEqual(task.finished, ["https://a.example/"])
        self.assertLess(stream.pos, 100)

    def test_tasks_joined_when_reading_raises(self):
        task = _Recorder(delay=0.3)

        def _lines():
            yield "https://a.example/\n"
            raise ValueError("stream closed")

        with self.assertRaises(ValueError):
            Pipeline(task).run(_lines())
        self.assertEqual(task.finished, ["https://a.example/"])

    def test_failed_thread_start_is_skipped(self):
        task = _Recorder()
        real_start = threading.Thread.start
        calls = []

        def _start(thread):
            calls.append(thread)
            if len(calls) == 1:
                raise RuntimeError("can't start new thread")
            real_start(thread)

        with patch.object(threading.Thread, "start", _start):
            with self.assertLogs("pagecrawl", level="ERROR"):
                dispatched = Pipeline(task).run(["a", "b", "c"])
        self.assertEqual(dispatched, 2)
        self.assertEqual(sorted(task.finished), ["b", "c"])

    def test_bounded_workers(self):
        active = 0
        peak = 0
        lock = threading.Lock()

        def _task(url):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.05)
            with lock:
                active -= 1

        dispatched = Pipeline(_task, max_workers=3).run([str(i) for i in range(12)])
        self.assertEqual(dispatched, 12)
        self.assertLessEqual(peak, 3)
        self.assertEqual(active, 0)


if __name__ == "__main__":
    unittest.main()
