"""
Page Fetcher

Shared HTTP client for search and product pages.
Handles the fixed user agent, politeness rate limiting and error mapping.
"""

import logging
import threading
import time
from typing import Dict, Optional
from urllib.parse import urlparse

import requests

from ..errors import FetchError
from .constants import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Thread-safe HTML fetcher shared by every worker in a run.

    Handles:
    - Fixed user agent on every request
    - Cap on requests in flight across all hosts
    - Minimum interval between two requests to the same host
    - Transport and HTTP status errors raised as FetchError

    Usage:
        with PageFetcher(user_agent="mozilla/17.0") as fetcher:
            html = fetcher.get_html("https://www.argos.co.uk/product/123")
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        min_host_interval: float = 1.0,
        max_in_flight: int = 4,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds
            min_host_interval: Minimum seconds between requests to one host
            max_in_flight: Maximum concurrent requests across all hosts
            session: Optional pre-built session (tests inject a mock here)
        """
        self.timeout = timeout
        self.min_host_interval = min_host_interval
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        })

        self._slots = threading.BoundedSemaphore(max(1, max_in_flight))
        self._lock = threading.Lock()
        self._next_slot: Dict[str, float] = {}
        self.requests_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self, url: str) -> None:
        """Reserve the next free request slot for the URL's host and wait for it."""
        host = urlparse(url).netloc.lower()

        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot.get(host, now))
            self._next_slot[host] = slot + self.min_host_interval
            self.requests_made += 1

        wait = slot - now
        if wait > 0:
            time.sleep(wait)

    def get_html(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        """
        GET a page and return its body as text.

        Args:
            url: Absolute URL to fetch
            params: Optional query parameters

        Returns:
            Response body

        Raises:
            FetchError: On connection failure, timeout or an HTTP error status
        """
        with self._slots:
            self._rate_limit(url)
            logger.debug("GET %s %s", url, params or "")
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                raise FetchError(url, f"{type(e).__name__}: {str(e)[:100]}") from e

        return response.text

    def get_stats(self) -> dict:
        """Return fetcher statistics."""
        return {
            'requests_made': self.requests_made,
        }
