"""
Product data models.

Pure data classes for representing catalog products and resolved prices.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Product:
    """Product identity as read from one catalog row."""
    name: str
    code: str    # Primary discriminator (model number)
    brand: str


@dataclass(frozen=True)
class PriceQuote:
    """Lowest price found for one product on one retailer, with its source page."""
    amount: Decimal
    url: str
