"""
Candidate Page Discovery

Searches the web for a product on one retailer and returns the result URLs
that plausibly point at the product's page there.
"""

import logging
from typing import Optional, Set

from ..common.config_loader import SearchSettings
from ..common.constants import DEFAULT_EXCLUDED_EXTENSIONS
from ..common.http_client import PageFetcher
from .result_filter import SearchResultFilter
from .search_parser import SearchResultsParser

logger = logging.getLogger(__name__)


def build_query(retailer: str, code: str, brand: str = "") -> str:
    """
    Search query text: retailer, code, brand, separated by single spaces.

    The text is sent as the `q` parameter, so requests encodes the spaces
    (including those inside the code) as "+".
    """
    parts = [retailer.strip(), " ".join(code.split()), brand.strip()]
    return " ".join(part for part in parts if part)


class CandidateDiscoverer:
    """Discovers candidate product page URLs through a search engine."""

    def __init__(
        self,
        fetcher: PageFetcher,
        settings: Optional[SearchSettings] = None,
        result_filter: Optional[SearchResultFilter] = None,
    ):
        """
        Initialize the discoverer.

        Args:
            fetcher: Shared page fetcher
            settings: Search URL and results page markup settings
            result_filter: Candidate filter (default excludes .pdf links)
        """
        self.fetcher = fetcher
        self.settings = settings or SearchSettings()
        self.parser = SearchResultsParser(self.settings)
        self.result_filter = result_filter or SearchResultFilter(DEFAULT_EXCLUDED_EXTENSIONS)

    def discover(self, retailer: str, code: str, brand: str = "", name: str = "") -> Set[str]:
        """
        Find candidate product page URLs.

        Args:
            retailer: Retailer domain (e.g., 'argos.co.uk')
            code: Product code (required)
            brand: Product brand, used in the query
            name: Product name, used by the result filter

        Returns:
            Set of candidate URLs (empty when no result qualifies)

        Raises:
            ValueError: If code is blank
            FetchError: If the search page could not be fetched
        """
        code = (code or "").strip()
        if not code:
            raise ValueError("Product code is required for discovery")

        brand = (brand or "").strip()
        name = (name or "").strip()

        query = build_query(retailer, code, brand)
        html = self.fetcher.get_html(self.settings.url, params={"q": query})

        candidates = {
            result.url
            for result in self.parser.parse(html)
            if self.result_filter.accepts(result, retailer, code, name)
        }

        logger.info("Found %d candidate pages for %s on %s", len(candidates), code, retailer)
        return candidates
