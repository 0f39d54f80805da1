#!/usr/bin/env python3
"""
List Retailers

Prints the retailer domains that have a price rule, with the rule used.
Catalog columns for other domains always come back empty.

Usage:
    python3 scripts/list_retailers.py
    python3 scripts/list_retailers.py --rules path/to/retailers.yaml
"""

import argparse
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from price_crawler.extraction import build_default_registry


def main():
    parser = argparse.ArgumentParser(description="List retailers with a price rule")
    parser.add_argument("--rules", help="Rules file (default: config/retailers.yaml)")
    args = parser.parse_args()

    registry = build_default_registry(args.rules)

    print(f"{'Retailer':<25} Rule")
    print("-" * 70)
    for domain in registry.domains():
        print(f"{domain:<25} {registry.get_rule(domain)!r}")
    print(f"\n{registry.count()} retailers")


if __name__ == "__main__":
    main()
