"""Reference extraction from fetched HTML."""

from pagecrawl.extraction.html_parser import extract_references, parse_document

__all__ = ["extract_references", "parse_document"]
