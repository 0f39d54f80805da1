"""Shared test fixtures."""

import threading
from urllib.parse import quote

import pytest
from openpyxl import Workbook

from price_crawler.errors import FetchError
from price_crawler.extraction import SelectorRule, SiteExtractorRegistry

SEARCH_URL = "https://www.google.com/search"
RESULT_CLASS = "ZINbbc xpd O9g5cc uUPGi"


def wrap_link(url: str) -> str:
    """Wrap a destination URL the way the results page does."""
    return f"/url?q={quote(url, safe='')}&sa=U&ved=2ahUKEwi"


def result_block(title: str, url: str, description: str) -> str:
    """One search result block; the second kCrYT element is the description."""
    return f"""
    <div class="{RESULT_CLASS}">
      <div class="kCrYT"><a href="{wrap_link(url)}"><h3><div>{title}</div></h3></a></div>
      <div class="kCrYT"><div>{description}</div></div>
    </div>
    """


def search_page(*blocks: str) -> str:
    return f"<html><body><div id='main'>{''.join(blocks)}</div></body></html>"


def price_page(price_html: str) -> str:
    return f"<html><body><h1>Product</h1>{price_html}</body></html>"


class FakeFetcher:
    """
    In-memory PageFetcher stand-in.

    Requests with params are treated as searches; everything else is looked
    up in `pages`. A page mapped to an exception raises it; an unknown URL
    raises FetchError like a 404 would.
    """

    def __init__(self, pages=None, search_html="", search_error=None):
        self.pages = dict(pages or {})
        self.search_html = search_html
        self.search_error = search_error
        self.calls = []
        self._lock = threading.Lock()

    def get_html(self, url, params=None):
        with self._lock:
            self.calls.append((url, params))

        if params is not None:
            if self.search_error is not None:
                raise self.search_error
            return self.search_html

        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise FetchError(url, "HTTPError: 404 Client Error")
        return page

    @property
    def search_calls(self):
        return [call for call in self.calls if call[1] is not None]

    @property
    def page_calls(self):
        return [call[0] for call in self.calls if call[1] is None]

    def close(self):
        pass


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def example_registry():
    """Registry with a single rule for example.com."""
    registry = SiteExtractorRegistry()
    registry.register("example.com", SelectorRule(".price"))
    return registry


@pytest.fixture
def make_workbook(tmp_path):
    """
    Build a catalog workbook on disk.

    Usage:
        path = make_workbook(["example.com"], [["Fridge X", "ABC123", "Acme", None]])
    """
    def _make(retailers, rows, filename="catalog.xlsx"):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(["Product Name", "Product Code", "Product Brand", *retailers])
        for row in rows:
            sheet.append(row)
        path = tmp_path / filename
        workbook.save(path)
        return path

    return _make
