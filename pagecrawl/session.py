"""
HTTP session creation for pagecrawl.

Every outbound request, page fetches and HTTP sink posts alike, carries the
same ``From`` and ``User-Agent`` headers.  Retries are disabled: a failed
request is logged by the caller and never repeated.
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from pagecrawl.config import POOL_CONNECTIONS, POOL_MAXSIZE, USER_AGENT


def crawl_headers(from_header: str) -> dict[str, str]:
    """Return the fixed identification headers sent with every request."""
    return {
        "From": from_header,
        "User-Agent": USER_AGENT,
    }


def build_session(from_header: str = "") -> requests.Session:
    """Return a ``requests.Session`` carrying the crawl headers.

    One session is shared by every worker thread.  The adapter's pool is
    thread-safe and the session holds no per-request state beyond cookies.
    """
    session = requests.Session()
    adapter = HTTPAdapter(
        max_retries=Retry(total=0, read=False, redirect=False),
        pool_connections=POOL_CONNECTIONS,
        pool_maxsize=POOL_MAXSIZE,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update(crawl_headers(from_header))
    return session
