"""
Order Builder
Holds the in-progress cart, customer and payment selection for one clerk
session and turns them into an immutable Order.
"""
import threading
import time
from datetime import date, datetime
from typing import List, Optional, Sequence

from orders.models import SKU, CartItem, Customer, Number, Order, PaymentMethod, normalize_amount
from sales_errors import ValidationFailed

_id_lock = threading.Lock()
_last_millis = 0


def _generate_order_id(now: Optional[datetime] = None) -> str:
    """
    Time-based order id, ORD-<epoch millis>.

    Ids taken from the live clock never repeat within the process: a clash
    moves the id on to the next unused millisecond. An explicit `now` is
    used as given.
    """
    global _last_millis
    if now is not None:
        return f"ORD-{int(now.timestamp() * 1000)}"
    with _id_lock:
        millis = max(int(time.time() * 1000), _last_millis + 1)
        _last_millis = millis
    return f"ORD-{millis}"


def order_problems(order: Order, drivers: Sequence[str] = ()) -> List[str]:
    """
    List every reason the order cannot be submitted.

    Args:
        order: Order to check
        drivers: Configured driver names. When given, the order's driver must be one of them.

    Returns:
        Human-readable problems, empty when the order is complete
    """
    problems = []
    if not order.items:
        problems.append("Cart is empty")
    if not order.customer.name.strip():
        problems.append("Customer name is required")
    if not order.customer.phone.strip():
        problems.append("Customer phone is required")
    if not isinstance(order.payment_method, PaymentMethod):
        problems.append("Payment method must be Bank Transfer or POS")
    if not (order.driver or "").strip():
        problems.append("Driver is required")
    elif drivers and order.driver not in drivers:
        problems.append(f"Driver must be one of the configured drivers: {order.driver}")
    for item in order.items:
        if item.quantity <= 0:
            problems.append(f"Quantity for {item.sku.name} must be positive")
    return problems


class OrderBuilder:
    """Manages cart state and order details before checkout"""

    def __init__(self, drivers: Sequence[str] = (), transaction_date: Optional[date] = None):
        """
        Initialize an empty order

        Args:
            drivers: Configured driver names; the first one is preselected
            transaction_date: Date the sale is recorded against (defaults to today)
        """
        self.drivers = list(drivers)
        self.items: List[CartItem] = []
        self.customer = Customer()
        self.payment_method: Optional[PaymentMethod] = None
        self.amount_entered: Optional[Number] = None
        self.driver = drivers[0] if drivers else ""
        self.transaction_date = transaction_date or date.today()

    # ─────────────────────────────────────────────────────────────
    # Cart
    # ─────────────────────────────────────────────────────────────

    def add_to_cart(self, sku: SKU, quantity: int = 1) -> CartItem:
        """
        Add an SKU to the cart, merging with an existing line for the same SKU

        Returns:
            The cart line that now holds the SKU
        """
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        for item in self.items:
            if item.sku.id == sku.id:
                item.quantity += quantity
                return item
        item = CartItem(sku=sku, quantity=quantity)
        self.items.append(item)
        return item

    def update_quantity(self, index: int, quantity: int):
        """Set a line's quantity. Zero or less removes the line."""
        if quantity <= 0:
            self.remove_item(index)
            return
        self.items[index].quantity = quantity

    def remove_item(self, index: int):
        del self.items[index]

    def clear_cart(self):
        self.items = []

    @property
    def total(self) -> Number:
        return normalize_amount(sum(item.line_total for item in self.items))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    # ─────────────────────────────────────────────────────────────
    # Order details
    # ─────────────────────────────────────────────────────────────

    def set_customer(self, name: str = "", address: str = "", phone: str = ""):
        self.customer = Customer(name=name.strip(), address=address.strip(), phone=phone.strip())

    def set_payment_method(self, method):
        """Accepts a PaymentMethod or its display value ('Bank Transfer', 'POS')"""
        try:
            self.payment_method = PaymentMethod(method)
        except ValueError:
            raise ValidationFailed([f"Unknown payment method: {method}"])

    def set_amount_paid(self, amount: Optional[Number]):
        if amount is not None and amount < 0:
            raise ValidationFailed(["Amount paid cannot be negative"])
        self.amount_entered = amount

    def set_driver(self, driver: str):
        self.driver = (driver or "").strip()

    def set_transaction_date(self, transaction_date: date):
        self.transaction_date = transaction_date

    # ─────────────────────────────────────────────────────────────
    # Checkout
    # ─────────────────────────────────────────────────────────────

    def _snapshot(self, order_id: str) -> Order:
        return Order(
            id=order_id,
            customer=Customer(**vars(self.customer)),
            items=tuple(CartItem(sku=item.sku, quantity=item.quantity) for item in self.items),
            payment_method=self.payment_method,
            driver=self.driver,
            transaction_date=self.transaction_date,
            amount_entered=self.amount_entered,
        )

    def problems(self) -> List[str]:
        return order_problems(self._snapshot(""), self.drivers)

    def can_checkout(self) -> bool:
        return not self.problems()

    def build(self, now: Optional[datetime] = None) -> Order:
        """
        Freeze the current state into an Order

        Raises:
            ValidationFailed: listing every missing field
        """
        order = self._snapshot(_generate_order_id(now))
        problems = order_problems(order, self.drivers)
        if problems:
            raise ValidationFailed(problems)
        return order

    def reset(self, drivers: Sequence[str] = ()):
        """Start a new order, keeping the transaction date"""
        self.__init__(drivers, transaction_date=self.transaction_date)
