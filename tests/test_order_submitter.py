"""
Order submission tests (fake spreadsheet)
=========================================

These tests verify that:
- Sales rows land on the sales tab and one payment row on the payments tab.
- Both appends are attempted and reported, with no retries.
- Validation happens before any remote call.
"""
import os
import sys
import unittest
from datetime import date
from unittest import mock

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(os.path.dirname(TESTS_DIR), "src"))
sys.path.insert(0, TESTS_DIR)

from sheet_fakes import PAYMENTS_GID, SALES_GID, depot_spreadsheet, make_api_error  # noqa: E402


def pos_order(amount=0):
    from orders.models import SKU
    from orders.order_builder import OrderBuilder

    builder = OrderBuilder(["DEPOT BULK"], transaction_date=date(2024, 3, 5))
    builder.add_to_cart(SKU("sku-0", "COKE 35CL PET", 4400, "PACK"), 3)
    builder.add_to_cart(SKU("sku-1", "COKE 50CL PET", 5800, "PACK"), 1)
    builder.set_customer("Mama Tunde Stores", "", "08031234567")
    builder.set_payment_method("POS")
    builder.set_amount_paid(amount)
    return builder.build()


class TestSubmitOrder(unittest.TestCase):
    def setUp(self):
        from settings_store.app_config import AppConfig
        from sheets.sheets_gateway import SheetsGateway

        self.fake = depot_spreadsheet()
        self.gateway = SheetsGateway.from_spreadsheet(self.fake)
        self.app_config = AppConfig()

    def test_full_success(self):
        from orders.order_submitter import submit_order

        order = pos_order()
        result = submit_order(self.gateway, order, self.app_config)

        self.assertTrue(result.fully_recorded)
        self.assertEqual(result.order_id, order.id)
        self.assertEqual(result.sales.updated_rows, 2)
        self.assertEqual(result.payment.updated_rows, 1)

        sales_rows = self.fake.rows(SALES_GID)
        payment_rows = self.fake.rows(PAYMENTS_GID)
        self.assertEqual(len(sales_rows), 2)
        self.assertEqual(len(payment_rows), 1)
        # Amount left at zero: total counts as paid, no balance
        self.assertEqual(sales_rows[0][17:19], ["19000", "0"])
        self.assertEqual(payment_rows[0][2], "POS")
        self.assertEqual(payment_rows[0][6], "19000")

    def test_sales_before_payment(self):
        from orders.order_submitter import submit_order

        submit_order(self.gateway, pos_order(), self.app_config)
        appends = [c[1] for c in self.fake.calls if c[0] == "values_append"]
        self.assertEqual(appends, ["'Sales Log (2024) - Main'", "'Customer''s Payments'"])

    def test_payment_protected_after_sales_success(self):
        from orders.order_submitter import submit_order
        from sales_errors import SheetProtected

        self.fake.append_errors["Customer's Payments"] = make_api_error(
            403, "You are trying to edit a protected cell or object."
        )
        result = submit_order(self.gateway, pos_order(), self.app_config)

        self.assertTrue(result.sales.ok)
        self.assertFalse(result.payment.ok)
        self.assertIsInstance(result.payment.error, SheetProtected)
        self.assertFalse(result.fully_recorded)
        # Exactly one attempt per tab
        appends = [c for c in self.fake.calls if c[0] == "values_append"]
        self.assertEqual(len(appends), 2)
        self.assertEqual(len(self.fake.rows(SALES_GID)), 2)
        self.assertEqual(self.fake.rows(PAYMENTS_GID), [])

    def test_sales_failure_still_attempts_payment(self):
        from orders.order_submitter import submit_order
        from sales_errors import TransientWriteFailure

        self.fake.append_errors["Sales Log (2024) - Main"] = make_api_error(503, "Backend error")
        result = submit_order(self.gateway, pos_order(), self.app_config)

        self.assertIsInstance(result.sales.error, TransientWriteFailure)
        self.assertTrue(result.sales.error.retryable)
        self.assertTrue(result.payment.ok)
        self.assertEqual(len(self.fake.rows(PAYMENTS_GID)), 1)

    def test_renamed_tab_is_still_found(self):
        from orders.order_submitter import submit_order

        self.fake.tabs[SALES_GID]["title"] = "Sales - Archive (old)"
        result = submit_order(self.gateway, pos_order(), self.app_config)
        self.assertTrue(result.sales.ok)
        self.assertTrue(result.sales.updated_range.startswith("'Sales - Archive (old)'"))

    def test_validation_before_network(self):
        from dataclasses import replace
        from orders.models import Customer
        from orders.order_submitter import submit_order
        from sales_errors import ValidationFailed

        broken = replace(pos_order(), customer=Customer(name="", phone=""))
        gateway = mock.Mock()
        with self.assertRaises(ValidationFailed) as ctx:
            submit_order(gateway, broken, self.app_config)
        self.assertEqual(len(ctx.exception.problems), 2)
        gateway.append_rows.assert_not_called()

    def test_driver_outside_config_rejected(self):
        from dataclasses import replace
        from orders.order_submitter import submit_order
        from sales_errors import ValidationFailed

        stray = replace(pos_order(), driver="NOT A CONFIGURED DRIVER")
        gateway = mock.Mock()
        with self.assertRaises(ValidationFailed) as ctx:
            submit_order(gateway, stray, self.app_config)
        self.assertEqual(ctx.exception.problems,
                         ["Driver must be one of the configured drivers: NOT A CONFIGURED DRIVER"])
        gateway.append_rows.assert_not_called()

    def test_missing_sheet_config_is_validation_error(self):
        from orders.order_submitter import submit_order
        from sales_errors import ValidationFailed

        app_config = self.app_config.with_updates({"paymentsSheetGid": ""})
        gateway = mock.Mock()
        with self.assertRaises(ValidationFailed) as ctx:
            submit_order(gateway, pos_order(), app_config)
        self.assertIn("Payments sheet GID is not configured", ctx.exception.problems)
        gateway.append_rows.assert_not_called()

    def test_result_dict(self):
        from orders.order_submitter import submit_order

        self.fake.append_errors["Customer's Payments"] = make_api_error(429, "Quota exceeded")
        data = submit_order(self.gateway, pos_order(), self.app_config).to_dict()
        self.assertFalse(data["fully_recorded"])
        self.assertTrue(data["sales"]["ok"])
        self.assertEqual(data["payment"]["error"]["code"], "TRANSIENT_WRITE_FAILURE")
        self.assertTrue(data["payment"]["error"]["retryable"])


if __name__ == "__main__":
    unittest.main()
