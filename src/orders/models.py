"""
Order domain models
Dataclasses for catalog items, cart lines, customers and completed orders.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple, Union

Number = Union[int, float]


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "Bank Transfer"
    POS = "POS"


def normalize_amount(value: Number) -> Number:
    """Collapse integral floats to int so whole-naira prices never gain a '.0'."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class SKU:
    """A priced stock-keeping unit from the price tab."""
    id: str
    name: str
    unit_price: Number
    pack_type: str = ""
    pack_type_2: str = ""


@dataclass
class CartItem:
    """One cart line. The line total is always derived from quantity and SKU price."""
    sku: SKU
    quantity: int

    @property
    def line_total(self) -> Number:
        return normalize_amount(self.quantity * self.sku.unit_price)


@dataclass
class Customer:
    name: str = ""
    address: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Order:
    """
    A completed order, built once and then only read.

    ``amount_entered`` is what the operator typed. When it is blank or zero
    the order total counts as paid; ``amount_paid`` applies that rule so the
    sheet rows and every receipt read the same figure.
    """
    id: str
    customer: Customer
    items: Tuple[CartItem, ...]
    payment_method: Optional[PaymentMethod]
    driver: str
    transaction_date: date
    amount_entered: Optional[Number] = None

    @property
    def subtotal(self) -> Number:
        return normalize_amount(sum(item.line_total for item in self.items))

    @property
    def total(self) -> Number:
        # No tax or discount model: total equals subtotal
        return self.subtotal

    @property
    def amount_paid(self) -> Number:
        if self.amount_entered is None or self.amount_entered <= 0:
            return self.total
        return normalize_amount(self.amount_entered)

    @property
    def balance(self) -> Number:
        return normalize_amount(max(0, self.total - self.amount_paid))

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)
