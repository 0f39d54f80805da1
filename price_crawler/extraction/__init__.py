"""
Price extraction for retailer product pages.

Modules:
    registry - SiteExtractorRegistry and SelectorRule (per-retailer price rules)
    price_parser - normalize_price (raw price text to Decimal)
"""

from .price_parser import normalize_price
from .registry import (
    PriceRule,
    SelectorRule,
    SiteExtractorRegistry,
    build_default_registry,
    build_registry,
)

__all__ = [
    'normalize_price',
    'PriceRule',
    'SelectorRule',
    'SiteExtractorRegistry',
    'build_registry',
    'build_default_registry',
]
