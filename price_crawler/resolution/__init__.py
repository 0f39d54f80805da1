"""
Price resolution for one (product, retailer) pair.

Modules:
    price_resolver - PriceResolver (discovery, page fan-out, minimum price)
"""

from .price_resolver import PriceResolver, build_resolver, lowest_quote

__all__ = ['PriceResolver', 'build_resolver', 'lowest_quote']
