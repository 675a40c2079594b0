"""
Order builder tests: cart math, checkout validation and the amount-paid rule.
"""
import os
import sys
import unittest
from unittest import mock
from datetime import date, datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from orders.models import SKU, PaymentMethod  # noqa: E402

COKE_35 = SKU(id="sku-0", name="COKE 35CL PET", unit_price=4400, pack_type="PACK")
COKE_50 = SKU(id="sku-1", name="COKE 50CL PET", unit_price=5800, pack_type="PACK")


def ready_builder(amount=None):
    from orders.order_builder import OrderBuilder

    builder = OrderBuilder(["DEPOT BULK", "ALABI MUSIBAU"], transaction_date=date(2024, 3, 5))
    builder.add_to_cart(COKE_35, 3)
    builder.add_to_cart(COKE_50, 1)
    builder.set_customer("Mama Tunde Stores", "12 Market Rd", "08031234567")
    builder.set_payment_method("POS")
    builder.set_amount_paid(amount)
    return builder


class TestCart(unittest.TestCase):
    def setUp(self):
        from orders.order_builder import OrderBuilder
        self.builder = OrderBuilder(["DEPOT BULK"])

    def test_line_total_tracks_quantity(self):
        item = self.builder.add_to_cart(COKE_35, 2)
        self.assertEqual(item.line_total, 8800)
        self.builder.update_quantity(0, 5)
        self.assertEqual(self.builder.items[0].line_total, 22000)

    def test_same_sku_merges(self):
        self.builder.add_to_cart(COKE_35)
        self.builder.add_to_cart(COKE_35, 2)
        self.assertEqual(len(self.builder.items), 1)
        self.assertEqual(self.builder.items[0].quantity, 3)

    def test_zero_quantity_removes_line(self):
        self.builder.add_to_cart(COKE_35)
        self.builder.add_to_cart(COKE_50)
        self.builder.update_quantity(0, 0)
        self.assertEqual([i.sku.id for i in self.builder.items], ["sku-1"])

    def test_remove_and_total(self):
        self.builder.add_to_cart(COKE_35, 3)
        self.builder.add_to_cart(COKE_50, 1)
        self.assertEqual(self.builder.total, 19000)
        self.assertEqual(self.builder.item_count, 4)
        self.builder.remove_item(1)
        self.assertEqual(self.builder.total, 13200)

    def test_first_driver_preselected(self):
        self.assertEqual(self.builder.driver, "DEPOT BULK")

    def test_non_positive_add_rejected(self):
        with self.assertRaises(ValueError):
            self.builder.add_to_cart(COKE_35, 0)


class TestCheckout(unittest.TestCase):
    def test_empty_order_lists_every_problem(self):
        from orders.order_builder import OrderBuilder
        from sales_errors import ValidationFailed

        builder = OrderBuilder([])
        self.assertFalse(builder.can_checkout())
        with self.assertRaises(ValidationFailed) as ctx:
            builder.build()
        problems = ctx.exception.problems
        self.assertIn("Cart is empty", problems)
        self.assertIn("Customer name is required", problems)
        self.assertIn("Customer phone is required", problems)
        self.assertIn("Driver is required", problems)
        self.assertEqual(len(problems), 5)

    def test_unknown_payment_method(self):
        from sales_errors import ValidationFailed

        builder = ready_builder()
        with self.assertRaises(ValidationFailed):
            builder.set_payment_method("Cash")

    def test_negative_amount_rejected(self):
        from sales_errors import ValidationFailed

        with self.assertRaises(ValidationFailed):
            ready_builder(amount=-1)

    def test_order_id_is_time_based(self):
        now = datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)
        order = ready_builder().build(now=now)
        self.assertEqual(order.id, f"ORD-{int(now.timestamp() * 1000)}")

    def test_order_ids_from_the_clock_do_not_repeat(self):
        from orders import order_builder

        with mock.patch.object(order_builder, "_last_millis", 0), \
                mock.patch.object(order_builder, "time") as clock:
            clock.time.return_value = 1709631015.1235
            ids = [ready_builder().build().id for _ in range(3)]
        self.assertEqual(ids, ["ORD-1709631015123", "ORD-1709631015124", "ORD-1709631015125"])

    def test_unconfigured_driver_rejected(self):
        from sales_errors import ValidationFailed

        builder = ready_builder()
        builder.set_driver("NOT ON THE LIST")
        self.assertFalse(builder.can_checkout())
        with self.assertRaises(ValidationFailed) as ctx:
            builder.build()
        self.assertEqual(ctx.exception.problems, ["Driver must be one of the configured drivers: NOT ON THE LIST"])

    def test_other_configured_driver_accepted(self):
        builder = ready_builder()
        builder.set_driver("ALABI MUSIBAU")
        self.assertEqual(builder.build().driver, "ALABI MUSIBAU")

    def test_blank_amount_means_paid_in_full(self):
        order = ready_builder(amount=None).build()
        self.assertEqual(order.total, 19000)
        self.assertEqual(order.amount_paid, 19000)
        self.assertEqual(order.balance, 0)
        self.assertEqual(order.payment_method, PaymentMethod.POS)

    def test_zero_amount_means_paid_in_full(self):
        order = ready_builder(amount=0).build()
        self.assertEqual(order.amount_paid, 19000)
        self.assertEqual(order.balance, 0)

    def test_partial_payment_leaves_balance(self):
        order = ready_builder(amount=15000).build()
        self.assertEqual(order.amount_paid, 15000)
        self.assertEqual(order.balance, 4000)

    def test_overpayment_has_no_negative_balance(self):
        order = ready_builder(amount=20000).build()
        self.assertEqual(order.balance, 0)

    def test_built_order_is_a_snapshot(self):
        builder = ready_builder()
        order = builder.build()
        builder.update_quantity(0, 10)
        builder.set_customer("Someone Else", "", "0800")
        self.assertEqual(order.items[0].quantity, 3)
        self.assertEqual(order.customer.name, "Mama Tunde Stores")

    def test_reset_keeps_date(self):
        builder = ready_builder()
        builder.reset(["LAWAL WILLIAMS"])
        self.assertEqual(builder.items, [])
        self.assertEqual(builder.driver, "LAWAL WILLIAMS")
        self.assertEqual(builder.transaction_date, date(2024, 3, 5))


if __name__ == "__main__":
    unittest.main()
