"""Core pipeline – fetching, output sinks and coordination."""

from pagecrawl.core.asset import Asset
from pagecrawl.core.fetcher import Fetcher
from pagecrawl.core.pipeline import Pipeline
from pagecrawl.core.sinks import FileSink, HTTPSink, Sink, build_sinks

__all__ = ["Asset", "Fetcher", "Pipeline", "Sink", "FileSink", "HTTPSink", "build_sinks"]
