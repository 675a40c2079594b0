"""Currency and date formatting shared by the receipt views."""
from datetime import date

from orders.models import Number


def _grouped(amount: Number) -> str:
    return f"{round(amount):,}"


def format_naira(amount: Number) -> str:
    """₦19,000 (whole naira, thousands separators)"""
    sign = "-" if amount < 0 else ""
    return f"{sign}₦{_grouped(abs(amount))}"


def format_naira_ascii(amount: Number) -> str:
    """NGN 19,000, for fonts without the naira sign"""
    sign = "-" if amount < 0 else ""
    return f"{sign}NGN {_grouped(abs(amount))}"


def format_receipt_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")
