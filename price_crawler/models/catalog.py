"""
Catalog data models.

The abstract (products x retailers) price matrix the sync engine works on,
and the per-cell outcome report it produces. Workbook I/O lives in
price_crawler.catalog.workbook.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from .product import Product


@dataclass
class PriceCell:
    """
    One (product, retailer) price.

    `populated` is the state inherited from the catalog before the run and
    decides whether the cell is re-resolved without overwrite. `changed` is
    set when the run writes or clears the cell.
    """
    value: Optional[object] = None
    populated: bool = False
    changed: bool = False

    def write(self, amount: Decimal) -> None:
        self.value = amount
        self.changed = True

    def clear(self) -> None:
        self.value = None
        self.changed = True


@dataclass
class CatalogRow:
    """A catalog row. `product` is None when the identity cells are unreadable."""
    row_number: int
    product: Optional[Product]
    cells: Dict[str, PriceCell] = field(default_factory=dict)


@dataclass
class Catalog:
    """Products x retailers price matrix."""
    retailers: List[str]
    rows: List[CatalogRow] = field(default_factory=list)

    def cell(self, row_number: int, retailer: str) -> PriceCell:
        for row in self.rows:
            if row.row_number == row_number:
                return row.cells[retailer]
        raise KeyError(f"No catalog row {row_number}")


class CellStatus(str, Enum):
    """Outcome of one cell in a sync run."""
    RESOLVED = "resolved"        # price written
    UNAVAILABLE = "unavailable"  # no price found, cell left as it was
    CLEARED = "cleared"          # no price found, stale value removed (overwrite)
    SKIPPED = "skipped"          # already populated, overwrite off
    FAILED = "failed"            # transient network failure, cell untouched
    CANCELLED = "cancelled"      # run aborted before the cell resolved


@dataclass
class CellOutcome:
    """Result of one (row, retailer) cell."""
    row_number: int
    retailer: str
    status: CellStatus
    amount: Optional[Decimal] = None
    source_url: str = ""
    error: str = ""


@dataclass
class SyncReport:
    """Per-cell outcomes of a sync run."""
    overwrite: bool
    outcomes: List[CellOutcome] = field(default_factory=list)
    skipped_rows: List[int] = field(default_factory=list)
    cancelled: bool = False

    def counts(self) -> Dict[str, int]:
        counter = Counter(outcome.status.value for outcome in self.outcomes)
        return {status.value: counter.get(status.value, 0) for status in CellStatus}

    def by_status(self, status: CellStatus) -> List[CellOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == status]

    @property
    def unresolved(self) -> List[CellOutcome]:
        """Cells that were attempted but got no price written."""
        return [
            outcome for outcome in self.outcomes
            if outcome.status in (CellStatus.UNAVAILABLE, CellStatus.CLEARED, CellStatus.FAILED)
        ]

    def get_stats(self) -> dict:
        """Return run statistics."""
        stats = self.counts()
        stats['skipped_rows'] = len(self.skipped_rows)
        stats['cancelled'] = self.cancelled
        return stats
