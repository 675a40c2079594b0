"""
Order Submitter
Appends a completed order to the sales tab (one row per item) and then the
payments tab (one row per order).

Both appends are always attempted and each reports its own outcome. Nothing
is retried here; a TransientWriteFailure is flagged retryable for the caller.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from orders.order_builder import order_problems
from orders.order_records import build_payment_row, build_sales_rows
from orders.models import Order
from sales_errors import ValidationFailed
from settings_store.app_config import AppConfig
from sheets.sheets_gateway import AppendOutcome
from utils.logger import get_logger

SALES_TARGET = "sales"
PAYMENT_TARGET = "payment"


@dataclass
class SubmissionResult:
    order_id: str
    sales: AppendOutcome
    payment: AppendOutcome

    @property
    def fully_recorded(self) -> bool:
        return self.sales.ok and self.payment.ok

    @property
    def errors(self) -> list:
        return [o.error for o in (self.sales, self.payment) if o.error is not None]

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "fully_recorded": self.fully_recorded,
            "sales": self.sales.to_dict(),
            "payment": self.payment.to_dict(),
        }


def config_problems(app_config: AppConfig) -> List[str]:
    problems = []
    if not app_config.spreadsheet_id:
        problems.append("Spreadsheet ID is not configured")
    if not app_config.sales_sheet_gid:
        problems.append("Sales sheet GID is not configured")
    if not app_config.payments_sheet_gid:
        problems.append("Payments sheet GID is not configured")
    return problems


def validate_submission(order: Order, app_config: AppConfig):
    """
    Raises:
        ValidationFailed: listing every order and configuration problem
    """
    problems = order_problems(order, app_config.drivers) + config_problems(app_config)
    if problems:
        raise ValidationFailed(problems)


def submit_order(gateway, order: Order, app_config: AppConfig,
                 submitted_at: Optional[datetime] = None) -> SubmissionResult:
    """
    Record an order in the spreadsheet.

    Args:
        gateway: SheetsGateway (or a test double with append_rows)
        order: Completed order
        app_config: Spreadsheet id, tab GIDs, loader and submitter names
        submitted_at: Submission time shared by every row (defaults to now)

    Returns:
        SubmissionResult with one outcome per tab

    Raises:
        ValidationFailed: before any network call
    """
    validate_submission(order, app_config)
    logger = get_logger()
    submitted_at = submitted_at or datetime.now(timezone.utc)

    logger.log_order_submit(order.id, len(order.items), order.total, order.driver)

    sales = gateway.append_rows(
        app_config.spreadsheet_id,
        app_config.sales_sheet_gid,
        build_sales_rows(order, app_config, submitted_at),
        target=SALES_TARGET,
    )
    logger.log_append_result(order.id, SALES_TARGET, sales)

    # Attempted even when the sales append failed
    payment = gateway.append_rows(
        app_config.spreadsheet_id,
        app_config.payments_sheet_gid,
        [build_payment_row(order, app_config, submitted_at)],
        target=PAYMENT_TARGET,
    )
    logger.log_append_result(order.id, PAYMENT_TARGET, payment)

    if sales.ok and not payment.ok:
        logger.warning(
            f"Order {order.id} - sales rows recorded but payment row missing",
            component="OrderSubmitter",
        )
    return SubmissionResult(order_id=order.id, sales=sales, payment=payment)
