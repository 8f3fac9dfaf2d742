"""
HTML parsing and ``href`` reference extraction via BeautifulSoup.
"""

from bs4 import BeautifulSoup
from bs4.element import Tag

from pagecrawl.utils.log import log

_BS4_PARSER = "lxml"


def parse_document(body: bytes | str) -> BeautifulSoup:
    """Tolerant-parse *body* into a document tree.

    Malformed markup never fails here: the parser repairs what it can.
    Should the parser itself raise, the error is logged and an empty
    document is returned so that extraction still runs.
    """
    try:
        return BeautifulSoup(body, _BS4_PARSER)
    except Exception as exc:  # bs4/lxml raise a wide range of types
        log.warning("[ERR] HTML parse failed, using empty document: %s", exc)
        return BeautifulSoup("", _BS4_PARSER)


def extract_references(node: Tag) -> list[str]:
    """Return every ``href`` attribute value under *node*, in pre-order.

    Any element carrying an ``href`` contributes, whatever its tag name.
    Attribute names are compared case-insensitively on their local part,
    so namespaced forms such as ``xlink:href`` count too; values are returned
    untouched, duplicates and all.  The walk uses an explicit stack so
    deeply nested documents cannot hit the recursion limit.
    """
    found: list[str] = []
    stack: list[Tag] = [node]
    while stack:
        current = stack.pop()
        for name, value in (current.attrs or {}).items():
            if name.rpartition(":")[2].lower() == "href":
                found.append(" ".join(value) if isinstance(value, list) else value)
        children = [child for child in current.children if isinstance(child, Tag)]
        stack.extend(reversed(children))
    return found
