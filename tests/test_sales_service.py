"""
Async service facade tests (fake spreadsheet, no network).
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


def bank_order():
    from orders.models import SKU
    from orders.order_builder import OrderBuilder

    builder = OrderBuilder(["DEPOT BULK"], transaction_date=date(2024, 3, 5))
    builder.add_to_cart(SKU("sku-0", "COKE 35CL PET", 4400, "PACK"), 1)
    builder.set_customer("Bola", "", "0802")
    builder.set_payment_method("Bank Transfer")
    return builder.build()


class TestSalesService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        from sales_service import SalesService
        from settings_store.app_config import AppConfig
        from sheets.sheets_gateway import SheetsGateway

        self.fake = depot_spreadsheet()
        self.service = SalesService(SheetsGateway.from_spreadsheet(self.fake))
        self.app_config = AppConfig()

    async def test_submit_order(self):
        result = await self.service.submit_order(bank_order(), self.app_config)
        self.assertTrue(result.fully_recorded)
        self.assertEqual(len(self.fake.rows(SALES_GID)), 1)
        self.assertEqual(self.fake.rows(PAYMENTS_GID)[0][2], "BANK TRANSFER")

    async def test_submit_validates_before_thread(self):
        from dataclasses import replace
        from sales_errors import ValidationFailed

        broken = replace(bank_order(), driver="")
        with mock.patch("sales_service.asyncio.to_thread") as to_thread:
            with self.assertRaises(ValidationFailed):
                await self.service.submit_order(broken, self.app_config)
        to_thread.assert_not_called()

    async def test_load_catalog(self):
        result = await self.service.load_catalog(self.app_config)
        self.assertEqual(result.source, "sheet")
        self.assertEqual(len(result.skus), 3)

    async def test_connectivity_ok(self):
        report = await self.service.test_connectivity(self.app_config)
        self.assertTrue(report.ok)
        # Header plus three products; the blank row is not counted
        self.assertEqual(report.row_count, 4)
        self.assertEqual(len(report.sample_rows), 3)
        self.assertEqual(report.sample_rows[0][0], "SKU")

    async def test_connectivity_failure(self):
        self.fake.read_errors["Price List"] = make_api_error(401, "Request had invalid authentication credentials.")
        report = await self.service.test_connectivity(self.app_config)
        self.assertFalse(report.ok)
        self.assertEqual(report.error.code, "UNAUTHENTICATED")
        self.assertEqual(report.to_dict()["error"]["code"], "UNAUTHENTICATED")


if __name__ == "__main__":
    unittest.main()
