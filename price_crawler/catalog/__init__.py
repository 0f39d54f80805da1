"""
Catalog I/O and price synchronisation.

Modules:
    workbook - CatalogWorkbook, load_catalog (Excel catalog in, sibling workbook out)
    sync_engine - CatalogSyncEngine (bounded parallel cell resolution)
"""

from .sync_engine import CatalogSyncEngine
from .workbook import CatalogWorkbook, load_catalog, output_path_for

__all__ = [
    'CatalogSyncEngine',
    'CatalogWorkbook',
    'load_catalog',
    'output_path_for',
]
