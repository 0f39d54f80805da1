"""
Exception hierarchy.

Structural misses (a price element missing from a page, a malformed search
block) are not errors and never raise; they surface as None.
"""


class PriceCrawlerError(Exception):
    """Base class for all crawler errors."""


class FetchError(PriceCrawlerError):
    """Transient network failure while fetching a search or product page."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url


class CatalogError(PriceCrawlerError):
    """The catalog could not be loaded or persisted. Fatal for the run."""
