"""
Candidate page discovery through a web search engine.

Modules:
    search_parser - SearchResultsParser (results page markup, redirect unwrapping)
    result_filter - SearchResultFilter (retailer/product/document checks)
    search_discoverer - CandidateDiscoverer (query, fetch, parse, filter)
"""

from .result_filter import SearchResultFilter
from .search_discoverer import CandidateDiscoverer, build_query
from .search_parser import SearchResult, SearchResultsParser, unwrap_redirect

__all__ = [
    'CandidateDiscoverer',
    'SearchResult',
    'SearchResultFilter',
    'SearchResultsParser',
    'build_query',
    'unwrap_redirect',
]
