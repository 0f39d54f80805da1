#!/usr/bin/env python3
"""
Update Catalog Prices

Finds the lowest current price of every product in a catalog workbook on
every retailer column, and writes the result to '<name>-Crawler.xlsx' next
to the input. The input workbook is left untouched.

Catalog layout (first sheet):
    Product Name | Product Code | Product Brand | argos.co.uk | ao.com | ...

Usage:
    python3 update_prices.py --file data/catalog.xlsx
    python3 update_prices.py --file data/catalog.xlsx --overwrite
    python3 update_prices.py --file data/catalog.xlsx --cell-workers 2 --verbose
"""

import argparse
import logging
import os
import sys

import yaml

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from price_crawler.catalog import CatalogSyncEngine, load_catalog, output_path_for
from price_crawler.common import load_crawler_settings, setup_logging
from price_crawler.errors import CatalogError
from price_crawler.models import CellStatus, SyncReport
from price_crawler.resolution import build_resolver

logger = logging.getLogger(__name__)


def print_summary(report: SyncReport, output_path) -> None:
    """Print run summary."""
    counts = report.counts()

    print("\n" + "=" * 60)
    print("Price Update Summary")
    print("=" * 60)
    print(f"  Prices written:       {counts[CellStatus.RESOLVED.value]}")
    print(f"  Not found:            {counts[CellStatus.UNAVAILABLE.value]}")
    print(f"  Cleared (stale):      {counts[CellStatus.CLEARED.value]}")
    print(f"  Kept (populated):     {counts[CellStatus.SKIPPED.value]}")
    print(f"  Failed (network):     {counts[CellStatus.FAILED.value]}")
    print(f"  Rows skipped:         {len(report.skipped_rows)}")
    if report.skipped_rows:
        print(f"     rows: {', '.join(str(n) for n in report.skipped_rows)}")

    failed = report.by_status(CellStatus.FAILED)
    if failed:
        print("\n  Failed cells (retry later):")
        for outcome in failed:
            print(f"     row {outcome.row_number:<5} {outcome.retailer:<25} {outcome.error[:60]}")

    print(f"\n  Output: {output_path}")
    print("=" * 60)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Update catalog prices with the lowest price found on each retailer"
    )
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="Catalog workbook (.xlsx)"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Re-resolve populated prices and clear those no longer found"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output workbook (default: <name>-Crawler.xlsx next to the input)"
    )
    parser.add_argument(
        "--config", "-c",
        help="Crawler config file (default: config/crawler.yaml)"
    )
    parser.add_argument(
        "--cell-workers",
        type=int,
        help="Catalog cells resolved concurrently"
    )
    parser.add_argument(
        "--page-workers",
        type=int,
        help="Candidate pages fetched concurrently per cell"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )
    parser.add_argument(
        "--log-file",
        help="Also append log records to this file"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        settings = load_crawler_settings(args.config)
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        logger.error("Unable to load crawler config: %s", e)
        return 1

    if args.cell_workers:
        settings.cell_workers = args.cell_workers
    if args.page_workers:
        settings.page_workers = args.page_workers

    output_path = args.output or output_path_for(args.file, settings.output_suffix)

    print("=" * 60)
    print("Catalog Price Update")
    print("=" * 60)
    print(f"  Catalog:   {args.file}")
    print(f"  Output:    {output_path}")
    print(f"  Overwrite: {'yes' if args.overwrite else 'no (empty cells only)'}")
    print(f"  Workers:   {settings.cell_workers} cells x {settings.page_workers} pages")

    try:
        book = load_catalog(args.file)
    except CatalogError as e:
        logger.error("Unable to load catalog: %s", e)
        return 1

    try:
        resolver = build_resolver(settings)
    except (FileNotFoundError, yaml.YAMLError, ValueError) as e:
        logger.error("Unable to load retailer rules: %s", e)
        book.close()
        return 1

    engine = CatalogSyncEngine(resolver, cell_workers=settings.cell_workers)

    try:
        report = engine.sync(book.catalog, overwrite=args.overwrite)
    except KeyboardInterrupt:
        logger.warning("Interrupted, no output written")
        return 130
    finally:
        resolver.fetcher.close()

    try:
        written = book.save(output_path)
    except CatalogError as e:
        logger.error("Unable to write catalog: %s (close the file if it is open)", e)
        return 1
    finally:
        book.close()

    print_summary(report, written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
