"""
Search Results Parser

Reads result blocks out of a search engine results page. Everything that
depends on the results page markup lives here: the result container class,
the title tag, the snippet class and the redirect wrapper around result links.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from ..common.config_loader import SearchSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """One organic search result."""
    title: str
    url: str
    description: str


def unwrap_redirect(href: Optional[str], prefix: str = "/url?q=") -> Optional[str]:
    """
    Extract the destination URL from a redirect-wrapped result link.

    "/url?q=https://www.argos.co.uk/product/123%3Fx%3D1&sa=U&ved=..." becomes
    "https://www.argos.co.uk/product/123?x=1": the wrapper's own trailing
    parameters are dropped and the destination is percent-decoded. The host
    is lowercased; everything after it is kept as is.

    Returns:
        Absolute http(s) URL, or None if the link is not wrapped
    """
    if not href or prefix not in href:
        return None

    wrapped = href.split(prefix, 1)[1].split("&", 1)[0]
    url = unquote(wrapped)

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return parsed._replace(netloc=parsed.netloc.lower()).geturl()


def _class_selector(class_names: str) -> str:
    """'ZINbbc xpd' -> '.ZINbbc.xpd'"""
    return "".join(f".{name}" for name in class_names.split())


class SearchResultsParser:
    """
    Parses result blocks from a results page.

    Usage:
        parser = SearchResultsParser(settings.search)
        results = parser.parse(html)
    """

    def __init__(self, settings: Optional[SearchSettings] = None):
        self.settings = settings or SearchSettings()

    def parse(self, html: str) -> List[SearchResult]:
        """
        Parse every complete result block.

        Blocks missing a title, a wrapped link or a description are skipped.

        Returns:
            Results in page order
        """
        soup = BeautifulSoup(html or "", "lxml")
        blocks = soup.select(_class_selector(self.settings.result_class))
        logger.debug("Found %d result blocks", len(blocks))

        results = []
        for block in blocks:
            result = self._parse_block(block)
            if result is not None:
                results.append(result)
        return results

    def _parse_block(self, block) -> Optional[SearchResult]:
        title_elem = block.find(self.settings.title_tag)
        link_elem = block.find("a", href=True)
        snippets = block.select(_class_selector(self.settings.snippet_class))

        if title_elem is None or link_elem is None or len(snippets) <= self.settings.snippet_index:
            logger.debug("Skipping incomplete result block")
            return None

        url = unwrap_redirect(link_elem.get("href"), self.settings.redirect_prefix)
        if url is None:
            logger.debug("Skipping result with unwrapped link: %s", link_elem.get("href"))
            return None

        return SearchResult(
            title=title_elem.get_text(" ", strip=True),
            url=url,
            description=snippets[self.settings.snippet_index].get_text(" ", strip=True),
        )
