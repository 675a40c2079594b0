"""
Order serialization for the sales and payments tabs.

Sales tab: one row per cart item, laid out as config.SALES_COLUMNS.
Payments tab: one row per order, laid out as config.PAYMENT_COLUMNS.

Order-level amounts (amount paid, balance) are repeated on every sales row.
Rows are sent with USER_ENTERED input, so free-text cells go through
as_text() to stay literal.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional

import config
from orders.models import Number, Order, PaymentMethod, normalize_amount
from settings_store.app_config import AppConfig

_SALES_INDEX = {name: idx for idx, name in enumerate(config.SALES_COLUMNS)}
_FORMULA_LEADS = ("=", "+", "-", "@", "'")
_NUMBER_LIKE = re.compile(r"[\d\s.,/:()+-]+")


@dataclass
class SalesLine:
    """Item-level fields recovered from a serialized sales row."""
    sku_name: str
    quantity: int
    unit_price: Number
    line_total: Number


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Submission wall-clock time, ISO-8601 UTC with milliseconds."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def as_text(value: str) -> str:
    """
    Prefix a free-text cell with an apostrophe when Sheets would otherwise
    read it as a formula, number or date ('=SUM', '08031234567', '12/05').
    Sheets does not store the apostrophe.
    """
    if value and (value.startswith(_FORMULA_LEADS) or _NUMBER_LIKE.fullmatch(value)):
        return "'" + value
    return value


def from_text(cell: str) -> str:
    """Undo as_text() on a cell read back as written."""
    return cell[1:] if cell.startswith("'") else cell


def format_transaction_date(value: date) -> str:
    return value.strftime(config.TRANSACTION_DATE_FORMAT)


def format_amount(value: Number) -> str:
    """Plain number text: 4400 stays '4400', 4400.5 stays '4400.5'."""
    return str(normalize_amount(value))


def bank_label(method: Optional[PaymentMethod]) -> str:
    if method == PaymentMethod.BANK_TRANSFER:
        return config.BANK_TRANSFER_LABEL
    return config.POS_LABEL


def _payment_text(method: Optional[PaymentMethod]) -> str:
    return method.value if method else ""


def build_sales_rows(order: Order, app_config: AppConfig, submitted_at: Optional[datetime] = None) -> List[List[str]]:
    """
    One row per cart item.

    Args:
        order: Completed order
        app_config: Supplies loader and submitter names
        submitted_at: Submission time (defaults to now)
    """
    timestamp = format_timestamp(submitted_at)
    transaction_date = format_transaction_date(order.transaction_date)
    rows = []
    for item in order.items:
        rows.append([
            timestamp,
            transaction_date,
            config.WAREHOUSE_LABEL,
            config.OPERATION_LABEL,
            as_text(item.sku.name),
            str(item.quantity),
            format_amount(item.sku.unit_price),
            format_amount(item.line_total),
            as_text(item.sku.pack_type),
            as_text(order.driver),
            as_text(app_config.loader_1),
            as_text(app_config.loader_2),
            as_text(app_config.submitted_by),
            as_text(order.customer.name),
            as_text(order.customer.address),
            as_text(order.customer.phone),
            _payment_text(order.payment_method),
            format_amount(order.amount_paid),
            format_amount(order.balance),
        ])
    return rows


def build_payment_row(order: Order, app_config: AppConfig, submitted_at: Optional[datetime] = None) -> List[str]:
    """Single payments-tab row for the whole order."""
    transaction_date = format_transaction_date(order.transaction_date)
    return [
        format_timestamp(submitted_at),
        transaction_date,
        bank_label(order.payment_method),
        config.WAREHOUSE_LABEL,
        as_text(order.driver),
        as_text(order.customer.name),
        format_amount(order.amount_paid),
        config.USE_NOW_FLAG,
        "",
        transaction_date,
        as_text(app_config.submitted_by),
    ]


def _parse_number(text: str) -> Number:
    return normalize_amount(float(text))


def parse_sales_row(row: List[str]) -> SalesLine:
    """
    Recover the item fields from a serialized sales row.

    Raises:
        ValueError: row is too short or a numeric cell does not parse
    """
    if len(row) < len(config.SALES_COLUMNS):
        raise ValueError(f"Sales row has {len(row)} cells, expected {len(config.SALES_COLUMNS)}")
    return SalesLine(
        sku_name=from_text(row[_SALES_INDEX["SKU_Name"]]),
        quantity=int(row[_SALES_INDEX["SKU_Qty"]]),
        unit_price=_parse_number(row[_SALES_INDEX["SKU_Price"]]),
        line_total=_parse_number(row[_SALES_INDEX["Total_Amount"]]),
    )
