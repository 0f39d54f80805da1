"""
Search Result Filter

Decides which search results plausibly point at the target product's page
on the target retailer.
"""

from typing import Iterable
from urllib.parse import urlparse

from ..common.constants import DEFAULT_EXCLUDED_EXTENSIONS
from .search_parser import SearchResult


class SearchResultFilter:
    """
    Accepts a result iff:
    1. its URL contains the retailer domain,
    2. its URL does not point at a document (.pdf, ...),
    3. the title mentions the product code, or the title mentions the
       product name and the description mentions the code.

    Product matching ignores case. The retailer domain is lowercased and must
    appear literally in the URL; hosts arrive lowercased from the results
    parser.
    """

    def __init__(self, excluded_extensions: Iterable[str] = DEFAULT_EXCLUDED_EXTENSIONS):
        self.excluded_extensions = tuple(ext.lower() for ext in excluded_extensions)

    def is_document(self, url: str) -> bool:
        url_lower = url.lower()
        path = urlparse(url_lower).path
        return url_lower.endswith(self.excluded_extensions) or path.endswith(self.excluded_extensions)

    def matches_retailer(self, url: str, retailer: str) -> bool:
        domain = retailer.strip().lower()
        return bool(domain) and domain in url

    @staticmethod
    def matches_product(result: SearchResult, code: str, name: str) -> bool:
        title = result.title.lower()
        code = code.lower()
        if code in title:
            return True
        return name.lower() in title and code in result.description.lower()

    def accepts(self, result: SearchResult, retailer: str, code: str, name: str) -> bool:
        """
        Check whether a result is a candidate page for the product on the retailer.

        Args:
            result: Parsed search result
            retailer: Retailer domain (e.g., 'ao.com')
            code: Product code, already stripped
            name: Product name (may be empty)

        Returns:
            True if the result URL should be scraped
        """
        return (
            self.matches_retailer(result.url, retailer)
            and not self.is_document(result.url)
            and self.matches_product(result, code, name)
        )
