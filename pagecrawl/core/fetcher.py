"""
Asset fetcher – GET one URL, extract its references, deliver the record.

A failure anywhere in a fetch is logged and ends that fetch only; nothing
here raises to the pipeline.
"""

from datetime import datetime, timezone

import requests

from pagecrawl.config import PipelineConfig
from pagecrawl.core.asset import Asset
from pagecrawl.errors import SinkError
from pagecrawl.extraction.html_parser import extract_references, parse_document
from pagecrawl.session import build_session
from pagecrawl.utils.log import log


class Fetcher:
    """Fetches pages and writes their Assets to the configured sinks.

    One instance is shared by every worker thread; it only reads its
    configuration after construction.
    """

    def __init__(
        self,
        config: PipelineConfig,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.session = session or build_session(config.from_header)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self, url: str) -> Asset | None:
        """GET *url* and build its Asset, or return ``None`` on failure."""
        log.info("[FETCH] %s", url)
        now = datetime.now(timezone.utc)

        try:
            req = self.session.prepare_request(requests.Request("GET", url))
        except (requests.RequestException, ValueError) as exc:
            log.error("[ERR] Cannot build request for %s: %s", url, exc)
            return None

        try:
            resp = self.session.send(req, stream=True, timeout=self.config.timeout)
        except requests.RequestException as exc:
            log.error("[ERR] Fetching %s failed: %s", url, exc)
            return None

        try:
            body = resp.content
        except requests.RequestException as exc:
            log.error("[ERR] Reading response from %s failed: %s", url, exc)
            return None
        finally:
            resp.close()

        doc = parse_document(body)
        return Asset(
            accessed=now,
            address=url,
            data=body if self.config.cache else None,
            references=extract_references(doc),
        )

    def emit(self, asset: Asset) -> int:
        """Write *asset* to every sink in order; return how many accepted it.

        The first failing sink stops delivery of this asset to the rest.
        """
        record = asset.to_json()
        delivered = 0
        for sink in self.config.sinks:
            try:
                sink.write(record)
            except SinkError as exc:
                log.error("[ERR] Output of %s failed: %s", asset.address, exc)
                break
            delivered += 1
        return delivered

    def process(self, url: str) -> Asset | None:
        """Fetch *url* and emit its Asset; the unit of work for one line."""
        asset = self.fetch(url)
        if asset is None:
            return None
        delivered = self.emit(asset)
        if delivered == len(self.config.sinks):
            log.info("[OK] %s (%d references)", url, len(asset.references))
        return asset
