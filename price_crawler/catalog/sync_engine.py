"""
Catalog Sync Engine

Walks the products x retailers matrix and resolves a price for every cell
that needs one, on a bounded worker pool.

- Empty cells are always resolved; populated cells only with overwrite.
- A found price is written; no price clears the cell with overwrite and
  leaves it untouched otherwise.
- Rows without readable identity cells are skipped.
- Results are merged on the calling thread only, one cell at a time.
- After cancellation nothing more is written; unresolved cells keep their
  pre-run value.
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Tuple

from ..errors import FetchError
from ..models import Catalog, CatalogRow, CellOutcome, CellStatus, SyncReport
from ..resolution import PriceResolver

logger = logging.getLogger(__name__)

# Seconds between cancellation checks while waiting on workers
POLL_INTERVAL = 0.5


class CatalogSyncEngine:
    """Fills a catalog's price cells using a PriceResolver."""

    def __init__(self, resolver: PriceResolver, cell_workers: int = 4):
        """
        Initialize the engine.

        Args:
            resolver: Price resolver shared by all workers
            cell_workers: Cells resolved concurrently
        """
        self.resolver = resolver
        self.cell_workers = max(1, cell_workers)

    def sync(
        self,
        catalog: Catalog,
        overwrite: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> SyncReport:
        """
        Resolve prices and write them into the catalog in place.

        Args:
            catalog: Catalog to update
            overwrite: Re-resolve populated cells and clear those with no price
            cancel_event: Set from another thread to abort the run

        Returns:
            SyncReport with one outcome per cell of every readable row
        """
        cancel_event = cancel_event or threading.Event()
        report = SyncReport(overwrite=overwrite)
        tasks = self._plan(catalog, overwrite, report)

        if tasks:
            logger.info("Resolving %d cells (%d workers, overwrite=%s)",
                        len(tasks), min(self.cell_workers, len(tasks)), overwrite)
            self._run(tasks, overwrite, cancel_event, report)

        order = {retailer: i for i, retailer in enumerate(catalog.retailers)}
        report.outcomes.sort(key=lambda o: (o.row_number, order.get(o.retailer, len(order))))
        return report

    def _plan(
        self,
        catalog: Catalog,
        overwrite: bool,
        report: SyncReport,
    ) -> List[Tuple[CatalogRow, str]]:
        """Pick the cells that need resolving; record skips."""
        tasks = []
        for row in catalog.rows:
            if row.product is None:
                logger.warning("Row %d: missing product name, code or brand, skipped", row.row_number)
                report.skipped_rows.append(row.row_number)
                continue

            for retailer in catalog.retailers:
                cell = row.cells[retailer]
                if cell.populated and not overwrite:
                    report.outcomes.append(CellOutcome(row.row_number, retailer, CellStatus.SKIPPED))
                    continue
                tasks.append((row, retailer))
        return tasks

    def _run(
        self,
        tasks: List[Tuple[CatalogRow, str]],
        overwrite: bool,
        cancel_event: threading.Event,
        report: SyncReport,
    ) -> None:
        executor = ThreadPoolExecutor(max_workers=min(self.cell_workers, len(tasks)))
        pending: Dict[Future, Tuple[CatalogRow, str]] = {}
        total = len(tasks)
        done_count = 0

        try:
            for row, retailer in tasks:
                product = row.product
                future = executor.submit(
                    self.resolver.resolve_quote,
                    retailer, product.code, product.brand, product.name, cancel_event,
                )
                pending[future] = (row, retailer)

            while pending and not cancel_event.is_set():
                done, _ = wait(pending, timeout=POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    if cancel_event.is_set():
                        break
                    row, retailer = pending.pop(future)
                    done_count += 1
                    outcome = self._merge(row, retailer, future, overwrite)
                    report.outcomes.append(outcome)
                    logger.info("[%d/%d] row %d %s: %s", done_count, total,
                                row.row_number, retailer, outcome.status.value)
        except KeyboardInterrupt:
            cancel_event.set()
            raise
        finally:
            executor.shutdown(wait=not cancel_event.is_set(), cancel_futures=True)
            if cancel_event.is_set():
                report.cancelled = True
                for row, retailer in pending.values():
                    report.outcomes.append(CellOutcome(row.row_number, retailer, CellStatus.CANCELLED))
                logger.warning("Run cancelled, %d cells left unresolved", len(pending))

    @staticmethod
    def _merge(row: CatalogRow, retailer: str, future: Future, overwrite: bool) -> CellOutcome:
        """Apply one finished resolution to its cell."""
        cell = row.cells[retailer]

        try:
            quote = future.result()
        except FetchError as e:
            logger.warning("Row %d %s: search failed: %s", row.row_number, retailer, e)
            return CellOutcome(row.row_number, retailer, CellStatus.FAILED, error=str(e))
        except Exception as e:
            # One broken cell must not abort the rest of the run
            logger.error("Row %d %s: resolution failed: %s: %s",
                         row.row_number, retailer, type(e).__name__, e)
            return CellOutcome(row.row_number, retailer, CellStatus.FAILED,
                               error=f"{type(e).__name__}: {e}")

        if quote is not None:
            cell.write(quote.amount)
            return CellOutcome(row.row_number, retailer, CellStatus.RESOLVED,
                               amount=quote.amount, source_url=quote.url)

        if overwrite and cell.populated:
            cell.clear()
            return CellOutcome(row.row_number, retailer, CellStatus.CLEARED)

        return CellOutcome(row.row_number, retailer, CellStatus.UNAVAILABLE)
