"""
Command-line interface for pagecrawl.

Reads URLs from standard input, one per line, until ``quit`` or end of
input.  Flag names are case-insensitive; their values are kept as given.
"""

import argparse
import sys
import time
from typing import BinaryIO

from pagecrawl.config import (
    DEFAULT_CONFIG_FILE, VERSION, PipelineConfig, load_settings,
)
from pagecrawl.core.fetcher import Fetcher
from pagecrawl.core.pipeline import Pipeline
from pagecrawl.core.sinks import build_sinks
from pagecrawl.errors import ConfigError
from pagecrawl.utils.log import log, log_file_path, setup_logging

HELP_INFO = """\
pagecrawl - fetch pages listed on stdin and record the links they contain

Usage: pagecrawl [-c] [-h] [-l] [-v] [--out-file=PATH[,PATH...]]
                 [--out-url=URL[,URL...]]

  -c                  include the raw page body (base64) in every record
  -h                  log this help text
  -l                  log the license text
  -v                  log the version
  --out-file=PATHS    append records to each comma-separated file
  --out-url=URLS      POST records to each comma-separated URL
  --config=PATH       INI settings file (default: pagecrawl-config.ini)
  --workers=N         cap concurrent fetches (default: unbounded)
  --timeout=SECONDS   per-request timeout (default: none)
  --debug             verbose console logging

Write one URL per line to stdin; a line reading "quit" stops input.
"""

LICENSE_INFO = """\
pagecrawl is free software: you can redistribute it and/or modify it under
the terms of the GNU General Public License as published by the Free
Software Foundation, either version 3 of the License, or (at your option)
any later version.

pagecrawl is distributed in the hope that it will be useful, but WITHOUT ANY
WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details: <https://www.gnu.org/licenses/>.
"""


def _file_targets(value: str) -> list[tuple[str, str]]:
    return [("file", p) for p in value.split(",") if p]


def _url_targets(value: str) -> list[tuple[str, str]]:
    return [("url", u) for u in value.split(",") if u]


_FLAG_OPTIONS = frozenset({"-c", "-h", "-l", "-v", "--debug"})
_VALUE_OPTIONS = frozenset({"--out-file", "--out-url", "--config", "--workers", "--timeout"})


def normalise_argv(argv: list[str]) -> list[str]:
    """Lower-case the names of known options (the part before ``=``).

    Values, positional arguments and unknown options are left untouched,
    including a value passed as the token after its option.
    """
    out = []
    expect_value = False
    for arg in argv:
        if expect_value:
            expect_value = False
        elif arg.startswith("-"):
            name, sep, value = arg.partition("=")
            folded = name.lower()
            if folded in _FLAG_OPTIONS or folded in _VALUE_OPTIONS:
                arg = folded + sep + value
                expect_value = folded in _VALUE_OPTIONS and not sep
        out.append(arg)
    return out


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pagecrawl",
        description="Fetch URLs read from stdin and emit their href references as JSON.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-c", dest="cache", action="store_true",
                        help="Cache the response body in each record")
    parser.add_argument("-h", dest="show_help", action="store_true",
                        help="Log the help text")
    parser.add_argument("-l", dest="show_license", action="store_true",
                        help="Log the license text")
    parser.add_argument("-v", dest="show_version", action="store_true",
                        help="Log the version")
    parser.add_argument("--out-file", dest="outputs", action="extend",
                        type=_file_targets, metavar="PATHS",
                        help="Comma-separated files to append records to")
    parser.add_argument("--out-url", dest="outputs", action="extend",
                        type=_url_targets, metavar="URLS",
                        help="Comma-separated URLs to POST records to")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE,
                        help=f"INI settings file (default: {DEFAULT_CONFIG_FILE})")
    parser.add_argument("--workers", type=int, default=None, metavar="N",
                        help="Maximum concurrent fetches (default: unbounded)")
    parser.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                        help="Per-request timeout (default: none)")
    parser.add_argument("--debug", action="store_true",
                        help="Enable verbose console logging")
    parser.set_defaults(outputs=[])
    raw = sys.argv[1:] if argv is None else argv
    args, ignored = parser.parse_known_args(normalise_argv(raw))
    args.ignored = ignored
    return args


def main(argv: list[str] | None = None, stdin: BinaryIO | None = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        sys.exit(f"pagecrawl: {exc}")

    log_file = log_file_path(settings.log_path, settings.log_name)
    try:
        setup_logging(debug=args.debug, log_file=log_file)
    except OSError as exc:
        sys.exit(f"pagecrawl: cannot create log file {log_file}: {exc}")

    if args.show_help:
        log.info("[INFO] %s", HELP_INFO)
    if args.show_license:
        log.info("[INFO] %s", LICENSE_INFO)
    if args.show_version:
        log.info("[INFO] pagecrawl %s", VERSION)
    if args.ignored:
        log.warning("[INFO] Ignoring unrecognised argument(s): %s", " ".join(args.ignored))

    sinks = build_sinks(args.outputs, from_header=settings.from_header,
                        timeout=args.timeout)
    if not sinks:
        log.warning("No output sinks configured; fetched pages will not be recorded")

    config = PipelineConfig(
        from_header=settings.from_header,
        cache=args.cache,
        sinks=sinks,
        timeout=args.timeout,
        max_workers=args.workers,
    )
    fetcher = Fetcher(config)
    pipeline = Pipeline(fetcher.process, max_workers=config.max_workers)

    t0 = time.monotonic()
    try:
        dispatched = pipeline.run(stdin if stdin is not None else sys.stdin.buffer)
    finally:
        for sink in sinks:
            sink.close()
        fetcher.session.close()
    log.info("Processed %d URL(s) in %.1f s", dispatched, time.monotonic() - t0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
