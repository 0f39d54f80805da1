"""
Catalog Workbook

Reads the product catalog from an Excel workbook and writes the updated
prices to a sibling workbook. The input file is never modified.

Layout of the first sheet:
    row 1:    Product Name | Product Code | Product Brand | <domain> | <domain> ...
    row 2..N: one product per row, one price (or blank) per retailer column
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..common.constants import (
    BRAND_COLUMN,
    CODE_COLUMN,
    DEFAULT_OUTPUT_SUFFIX,
    FIRST_RETAILER_COLUMN,
    NAME_COLUMN,
)
from ..errors import CatalogError
from ..models import Catalog, CatalogRow, PriceCell, Product

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.xlsx', '.xlsm')


def output_path_for(path: Union[str, Path], suffix: str = DEFAULT_OUTPUT_SUFFIX) -> Path:
    """'prices.xlsx' -> 'prices-Crawler.xlsx' in the same directory."""
    path = Path(path)
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")


def _cell_text(value) -> Optional[str]:
    """Cell value as stripped text; numeric codes lose a trailing '.0'."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _is_populated(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class CatalogWorkbook:
    """
    Excel-backed catalog.

    Usage:
        book = load_catalog("prices.xlsx")
        engine.sync(book.catalog, overwrite=False)
        book.save()   # writes prices-Crawler.xlsx
    """

    def __init__(self, path: Union[str, Path], workbook: Workbook):
        self.path = Path(path)
        self.workbook = workbook
        self.sheet = workbook.worksheets[0]
        self._columns: Dict[str, int] = {}
        self.catalog = self._read()

    def _read(self) -> Catalog:
        header = next(self.sheet.iter_rows(min_row=1, max_row=1, values_only=True), ())

        retailers = []
        for index, value in enumerate(header):
            if index < FIRST_RETAILER_COLUMN:
                continue
            retailer = _cell_text(value)
            if not retailer:
                continue
            if retailer in self._columns:
                logger.warning("Duplicate retailer column '%s' ignored", retailer)
                continue
            self._columns[retailer] = index + 1
            retailers.append(retailer)

        if not retailers:
            logger.warning("No retailer columns found in %s", self.path.name)

        catalog = Catalog(retailers=retailers)
        width = max(self.sheet.max_column, FIRST_RETAILER_COLUMN)

        for row_number, values in enumerate(
            self.sheet.iter_rows(min_row=2, max_col=width, values_only=True), start=2
        ):
            name = _cell_text(values[NAME_COLUMN])
            code = _cell_text(values[CODE_COLUMN])
            brand = _cell_text(values[BRAND_COLUMN])

            product = None
            if name is not None and code and brand is not None:
                product = Product(name=name, code=code, brand=brand)

            cells = {}
            for retailer, column in self._columns.items():
                value = values[column - 1] if column - 1 < len(values) else None
                cells[retailer] = PriceCell(value=value, populated=_is_populated(value))

            catalog.rows.append(CatalogRow(row_number=row_number, product=product, cells=cells))

        logger.info("Loaded %d rows x %d retailers from %s",
                    len(catalog.rows), len(retailers), self.path.name)
        return catalog

    def apply_changes(self) -> int:
        """
        Copy written and cleared cells from the catalog into the sheet.

        Returns:
            Number of sheet cells updated
        """
        updated = 0
        for row in self.catalog.rows:
            for retailer, cell in row.cells.items():
                if not cell.changed:
                    continue
                sheet_cell = self.sheet.cell(row=row.row_number, column=self._columns[retailer])
                if cell.value is None:
                    sheet_cell.value = None
                else:
                    sheet_cell.value = float(cell.value)
                    sheet_cell.number_format = "0.00"
                updated += 1
        return updated

    def save(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the updated workbook next to the input file.

        Args:
            output_path: Override the default '<stem>-Crawler.xlsx' location

        Returns:
            Path written

        Raises:
            CatalogError: If the output would replace the input or cannot be written
        """
        target = Path(output_path) if output_path else output_path_for(self.path)
        if target.resolve() == self.path.resolve():
            raise CatalogError(f"Refusing to overwrite the input catalog {self.path}")

        updated = self.apply_changes()
        try:
            self.workbook.save(target)
        except OSError as e:
            raise CatalogError(f"Could not write {target}: {e}") from e

        logger.info("Wrote %d updated cells to %s", updated, target)
        return target

    def close(self) -> None:
        self.workbook.close()


def load_catalog(path: Union[str, Path]) -> CatalogWorkbook:
    """
    Load a catalog workbook.

    Raises:
        CatalogError: If the file is missing, locked, not .xlsx or corrupt
    """
    path = Path(path)
    if not path.is_file():
        raise CatalogError(f"Catalog not found: {path}")
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise CatalogError(
            f"Unsupported catalog format '{path.suffix}'. Supported: {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        workbook = load_workbook(path, keep_vba=path.suffix.lower() == ".xlsm")
    except (InvalidFileException, BadZipFile, OSError, KeyError, ValueError) as e:
        raise CatalogError(f"Could not open {path}: {type(e).__name__}: {e}") from e

    return CatalogWorkbook(path, workbook)
