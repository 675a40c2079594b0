"""
Sales Service
Async facade used by the API layer. Each blocking Sheets step runs in a
worker thread and is awaited in turn; the sales and payment appends are
never in flight at the same time.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from catalog.catalog_source import CatalogLoadResult, is_blank_row, load_catalog
from orders.models import Order
from orders.order_submitter import SubmissionResult, submit_order, validate_submission
from sales_errors import SalesError
from settings_store.app_config import AppConfig
from utils.logger import get_logger

SAMPLE_ROW_COUNT = 3


@dataclass
class ConnectivityReport:
    ok: bool
    message: str
    row_count: int = 0
    sample_rows: List[List[str]] = field(default_factory=list)
    error: Optional[SalesError] = None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "message": self.message,
            "row_count": self.row_count,
            "sample_rows": self.sample_rows,
            "error": self.error.to_dict() if self.error else None,
        }


class SalesService:
    """
    Client-facing operations over one SheetsGateway.

    The gateway is passed in; configuration travels with every call, so a
    single instance can serve every request.
    """

    def __init__(self, gateway):
        self.gateway = gateway
        self.logger = get_logger()

    async def load_catalog(self, app_config: AppConfig) -> CatalogLoadResult:
        return await asyncio.to_thread(load_catalog, self.gateway, app_config)

    async def submit_order(self, order: Order, app_config: AppConfig,
                           submitted_at: Optional[datetime] = None) -> SubmissionResult:
        """
        Raises:
            ValidationFailed: before any thread or network work starts
        """
        validate_submission(order, app_config)
        return await asyncio.to_thread(submit_order, self.gateway, order, app_config, submitted_at)

    async def test_connectivity(self, app_config: AppConfig) -> ConnectivityReport:
        """Read the price tab and report how many non-blank rows it holds."""
        try:
            rows = await asyncio.to_thread(
                self.gateway.read_tab_as_table,
                app_config.spreadsheet_id,
                app_config.price_sheet_gid,
            )
        except SalesError as e:
            self.logger.error(f"Connectivity test failed: {e.code}: {e.message}", component="SalesService")
            return ConnectivityReport(ok=False, message=e.message, error=e)

        rows = [row for row in rows if not is_blank_row(row)]
        self.logger.info(f"Connectivity test read {len(rows)} row(s)", component="SalesService")
        return ConnectivityReport(
            ok=True,
            message="Connection test successful",
            row_count=len(rows),
            sample_rows=rows[:SAMPLE_ROW_COUNT],
        )
