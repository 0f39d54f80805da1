"""
Price Resolver

Pipeline entry point for one (product, retailer) pair:

1. Check the retailer has a price rule (no rule, no network calls)
2. Discover candidate product pages through search
3. Fetch every candidate concurrently, extract and parse its price
4. Return the lowest price found

Minimum price is the policy: it is the best deal a shopper could find,
and decoy or variant pages among the candidates are tolerated.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal
from typing import List, Optional

from ..common.config_loader import CrawlerSettings
from ..common.http_client import PageFetcher
from ..discovery import CandidateDiscoverer, SearchResultFilter
from ..errors import FetchError
from ..extraction import SiteExtractorRegistry, build_default_registry, normalize_price
from ..models import PriceQuote

logger = logging.getLogger(__name__)


def lowest_quote(quotes: List[PriceQuote]) -> Optional[PriceQuote]:
    """Cheapest quote; equal amounts go to the smallest URL so order never matters."""
    if not quotes:
        return None
    return min(quotes, key=lambda quote: (quote.amount, quote.url))


class PriceResolver:
    """Resolves the lowest price of a product on one retailer."""

    def __init__(
        self,
        discoverer: CandidateDiscoverer,
        registry: SiteExtractorRegistry,
        fetcher: PageFetcher,
        page_workers: int = 3,
    ):
        """
        Initialize the resolver.

        Args:
            discoverer: Candidate page discoverer
            registry: Retailer price rules (read-only during a run)
            fetcher: Shared page fetcher
            page_workers: Candidate pages fetched concurrently per pair
        """
        self.discoverer = discoverer
        self.registry = registry
        self.fetcher = fetcher
        self.page_workers = max(1, page_workers)

    def resolve(self, retailer: str, code: str, brand: str = "", name: str = "") -> Optional[Decimal]:
        """
        Resolve the lowest price of a product on a retailer.

        Returns:
            Lowest price, or None if no price could be determined

        Raises:
            FetchError: If the search itself failed
        """
        quote = self.resolve_quote(retailer, code, brand, name)
        return quote.amount if quote else None

    def resolve_quote(
        self,
        retailer: str,
        code: str,
        brand: str = "",
        name: str = "",
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[PriceQuote]:
        """
        Resolve the lowest price together with the page it came from.

        Args:
            retailer: Retailer domain
            code: Product code
            brand: Product brand
            name: Product name
            cancel_event: When set, candidate pages not yet fetched are abandoned

        Returns:
            PriceQuote, or None if no price could be determined

        Raises:
            FetchError: If the search itself failed
        """
        if not self.registry.has_rule(retailer):
            logger.debug("No price rule for %s, skipping", retailer)
            return None

        urls = self.discoverer.discover(retailer, code, brand, name)
        if not urls:
            return None

        quotes = []
        workers = min(self.page_workers, len(urls))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._quote_page, retailer, url, cancel_event)
                for url in sorted(urls)
            ]
            for future in as_completed(futures):
                quote = future.result()
                if quote is not None:
                    quotes.append(quote)

        best = lowest_quote(quotes)
        if best is None:
            logger.info("No price found for %s on %s (%d pages tried)", code, retailer, len(urls))
        else:
            logger.info("%s on %s: %s (%s)", code, retailer, best.amount, best.url)
        return best

    def _quote_page(
        self,
        retailer: str,
        url: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[PriceQuote]:
        """Fetch one candidate page and read its price. Fetch failures are skipped."""
        if cancel_event is not None and cancel_event.is_set():
            return None

        try:
            html = self.fetcher.get_html(url)
        except FetchError as e:
            logger.warning("Skipping candidate page: %s", e)
            return None

        raw = self.registry.extract(retailer, html)
        if raw is None:
            logger.debug("No price element on %s", url)
            return None

        amount = normalize_price(raw)
        if amount is None:
            logger.debug("Could not parse price %r on %s", raw, url)
            return None

        return PriceQuote(amount=amount, url=url)


def build_resolver(
    settings: CrawlerSettings,
    registry: Optional[SiteExtractorRegistry] = None,
    fetcher: Optional[PageFetcher] = None,
) -> PriceResolver:
    """
    Wire a resolver from crawler settings.

    Args:
        settings: Loaded crawler settings
        registry: Price rules (default: config/retailers.yaml); frozen here
        fetcher: Shared fetcher (default: a new one from settings; caller closes it
            via resolver.fetcher.close())

    Returns:
        Ready-to-run PriceResolver
    """
    if registry is None:
        registry = build_default_registry()
    registry.freeze()

    if fetcher is None:
        fetcher = PageFetcher(
            user_agent=settings.user_agent,
            timeout=settings.timeout,
            min_host_interval=settings.min_host_interval,
            max_in_flight=settings.max_in_flight,
        )

    discoverer = CandidateDiscoverer(
        fetcher,
        settings=settings.search,
        result_filter=SearchResultFilter(settings.excluded_extensions),
    )
    return PriceResolver(discoverer, registry, fetcher, page_workers=settings.page_workers)
