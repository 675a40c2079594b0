"""
Catalog Source
==============

Loads priced SKUs from the price tab of the configured spreadsheet.

Price tab layout (row 0 is the header):
    SKU name | Unit price | Pack type | Pack type 2

Every load is a full refetch. When the tab cannot be read the built-in
price list is returned instead, because a stale price is better than a
clerk who cannot take orders.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from catalog.fallback_catalog import fallback_catalog
from orders.models import SKU, Number, normalize_amount
from sales_errors import CatalogUnavailable, SalesError
from settings_store.app_config import AppConfig
from utils.logger import get_logger

_PRICE_NOISE = re.compile(r"[^\d.\-]")

SOURCE_SHEET = "sheet"
SOURCE_FALLBACK = "fallback"


@dataclass
class CatalogLoadResult:
    skus: List[SKU]
    source: str = SOURCE_SHEET
    message: str = ""
    error: Optional[SalesError] = field(default=None, repr=False)

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


def parse_price(text: str) -> Number:
    """Parse '₦4,400', '4400.00' or ' 4 400 ' into a number. Unparseable values are 0."""
    cleaned = _PRICE_NOISE.sub("", text or "")
    try:
        return normalize_amount(float(cleaned))
    except ValueError:
        return 0


def _cell(row: List[str], idx: int) -> str:
    return (row[idx] if idx < len(row) else "").strip()


def is_blank_row(row: List[str]) -> bool:
    return all(not (cell or "").strip() for cell in row)


def rows_to_skus(rows: List[List[str]]) -> List[SKU]:
    """Skip the header row, drop blank rows, map the rest to SKUs."""
    skus = []
    for row in rows[1:]:
        if is_blank_row(row):
            continue
        skus.append(SKU(
            id=f"sku-{len(skus)}",
            name=_cell(row, 0),
            unit_price=parse_price(_cell(row, 1)),
            pack_type=_cell(row, 2),
            pack_type_2=_cell(row, 3),
        ))
    return skus


def fetch_catalog(gateway, spreadsheet_id: str, price_sheet_gid: str) -> List[SKU]:
    """
    Read the price tab and return its SKUs.

    Raises:
        CatalogUnavailable: the tab could not be read for any reason.
    """
    try:
        rows = gateway.read_tab_as_table(spreadsheet_id, price_sheet_gid)
    except SalesError as e:
        raise CatalogUnavailable(f"Price tab could not be read: {e.message}", detail=e.code) from e
    return rows_to_skus(rows)


def load_catalog(gateway, app_config: AppConfig) -> CatalogLoadResult:
    """Fetch the catalog, substituting the built-in list on failure. Never raises CatalogUnavailable."""
    logger = get_logger()
    try:
        skus = fetch_catalog(gateway, app_config.spreadsheet_id, app_config.price_sheet_gid)
    except CatalogUnavailable as e:
        skus = fallback_catalog()
        logger.log_catalog_fallback(e.message, len(skus))
        return CatalogLoadResult(
            skus=skus,
            source=SOURCE_FALLBACK,
            message="Failed to load product catalog. Using offline data.",
            error=e,
        )

    logger.info(f"{len(skus)} products loaded from catalog", component="Catalog")
    return CatalogLoadResult(skus=skus, message=f"{len(skus)} products loaded from catalog.")
