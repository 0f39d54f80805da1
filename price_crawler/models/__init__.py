"""
Data models for price discovery.

This module contains pure data classes with no business logic.
"""

from .catalog import Catalog, CatalogRow, CellOutcome, CellStatus, PriceCell, SyncReport
from .product import PriceQuote, Product

__all__ = [
    'Product',
    'PriceQuote',
    'PriceCell',
    'CatalogRow',
    'Catalog',
    'CellStatus',
    'CellOutcome',
    'SyncReport',
]
