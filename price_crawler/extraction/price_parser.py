"""
Price Text Parser

Turns free-text prices scraped from retailer pages into Decimal amounts.

Every character that is not a digit or a period is dropped before parsing,
so currency symbols, spaces and comma thousands separators disappear:

    "£1,234"   -> 1234
    "£199.99"  -> 199.99
    "$499.00"  -> 499.00

Known limitation: locales that use the period as thousands separator are
misread ("1.234,56" -> 1.23456). A remainder with several periods
("1.234.567") does not parse and yields None.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

logger = logging.getLogger(__name__)

_NON_PRICE_CHARS = re.compile(r'[^\d.]+')


def normalize_price(raw: Optional[str]) -> Optional[Decimal]:
    """
    Parse a raw price string.

    Args:
        raw: Price text as found on the page (e.g. "£1,299.99")

    Returns:
        Non-negative Decimal, or None if the text holds no parsable number
    """
    if not raw:
        return None

    cleaned = _NON_PRICE_CHARS.sub('', raw)
    if not cleaned:
        return None

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        logger.debug("Unparsable price text: %r", raw)
        return None

    return amount
