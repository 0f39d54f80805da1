#!/usr/bin/env python3
"""
Single Product Price Lookup

Finds the lowest price of one product on one retailer, with the page it
was found on.

Usage:
    python3 find_price.py --website argos.co.uk --code "KGN36VWEAG" --brand Bosch
    python3 find_price.py --website ao.com --code ABC123 --name "Fridge X" --verbose
"""

import argparse
import logging
import os
import sys

import yaml

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from price_crawler.common import load_crawler_settings, setup_logging
from price_crawler.errors import FetchError
from price_crawler.resolution import build_resolver

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Find the lowest price of a product on a retailer")
    parser.add_argument("--website", "-w", required=True, help="Retailer domain (e.g. argos.co.uk)")
    parser.add_argument("--code", required=True, help="Product code")
    parser.add_argument("--brand", default="", help="Product brand")
    parser.add_argument("--name", default="", help="Product name")
    parser.add_argument("--config", "-c", help="Crawler config file (default: config/crawler.yaml)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    try:
        resolver = build_resolver(load_crawler_settings(args.config))
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        logger.error("Unable to load config: %s", e)
        return 1

    if not resolver.registry.has_rule(args.website):
        print(f"No price rule for {args.website}. Known: {', '.join(resolver.registry.domains())}")
        return 1

    try:
        quote = resolver.resolve_quote(args.website, args.code, args.brand, args.name)
    except ValueError as e:
        logger.error("Invalid product: %s", e)
        return 1
    except FetchError as e:
        logger.error("Search failed: %s", e)
        return 1
    finally:
        resolver.fetcher.close()

    if quote is None:
        print(f"{args.code} on {args.website}: price unavailable")
    else:
        print(f"{args.code} on {args.website}: {quote.amount}")
        print(f"  Source: {quote.url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
