"""Shared HTTP client with automatic retry and exponential backoff."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session that looks like a desktop browser.

    Retries up to 3 times with exponential backoff (1s, 2s, 4s) on 429/5xx.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers["User-Agent"] = BROWSER_USER_AGENT
        retry = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
    return _session
