"""
The Asset record emitted for every fetched page.
"""

import base64
import json
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Asset:
    """One fetched page: where it came from, when, and what it links to.

    ``data`` holds the raw body only when caching is enabled for the run.
    """

    accessed: datetime
    address: str
    data: bytes | None = None
    references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "accessed": format_timestamp(self.accessed),
            "address": self.address,
            "data": base64.b64encode(self.data).decode("ascii") if self.data is not None else None,
            "references": list(self.references),
        }

    def to_json(self) -> bytes:
        """Encode as compact UTF-8 JSON; ``data`` becomes base64 text."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def format_timestamp(when: datetime) -> str:
    """ISO-8601 UTC with a ``Z`` suffix, e.g. ``2023-05-01T12:00:00.123456Z``."""
    return when.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
