import unittest

from api.errors import RequestFailed
from fake_api import FakeInventoryApi
from viewmodels.records import (
    ProductAdminViewModel,
    ProductFormFill,
    StockViewModel,
    SupplierViewModel,
)


async def confirm_yes() -> bool:
    return True


async def confirm_no() -> bool:
    return False


class RecordViewModelTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.fake = FakeInventoryApi()
        self.api = self.fake.admin_client()

    async def asyncTearDown(self):
        await self.api.aclose()

    # ---------- Suppliers ----------

    async def test_supplier_crud_reloads_list(self):
        suppliers = SupplierViewModel(self.api)
        await suppliers.load()
        self.assertEqual(len(suppliers.records), 1)

        created = await suppliers.create(
            {"name": "Nia", "company": "Bolt Co", "phone": "555-0199"}
        )
        self.assertEqual(created.company, "Bolt Co")
        self.assertEqual(len(suppliers.records), 2)

        await suppliers.update(created.id, {"phone": "555-0000"})
        self.assertEqual(suppliers.find(created.id).phone, "555-0000")
        self.assertEqual(self.fake.count("GET", "/api/suppliers"), 3)

    async def test_delete_needs_confirmation(self):
        suppliers = SupplierViewModel(self.api)
        await suppliers.load()

        self.assertFalse(await suppliers.delete("sup-1", confirm_no))
        self.assertEqual(self.fake.count("DELETE", "/api/suppliers/sup-1"), 0)

        self.assertTrue(await suppliers.delete("sup-1", confirm_yes))
        self.assertEqual(self.fake.count("DELETE", "/api/suppliers/sup-1"), 1)
        self.assertEqual(suppliers.records, ())

    async def test_failed_write_keeps_records(self):
        suppliers = SupplierViewModel(self.api)
        await suppliers.load()
        with self.assertRaises(RequestFailed):
            await suppliers.update("sup-404", {"name": "Ghost"})
        self.assertEqual(len(suppliers.records), 1)
        self.assertEqual(suppliers.last_error.status, 404)

    # ---------- Stock ----------

    async def test_stock_payload_and_create(self):
        stocks = StockViewModel(self.api)
        self.assertTrue(await stocks.load_all())
        self.assertEqual(len(stocks.suppliers.records), 1)

        with self.assertRaises(ValueError):
            StockViewModel.payload("Tools", -1, "sup-1")

        payload = StockViewModel.payload("Tools", 12, "sup-1", "Spanner")
        self.assertEqual(payload["supplierId"], "sup-1")
        created = await stocks.create(payload)
        self.assertEqual(created.quantity, 12)
        self.assertEqual(created.supplier.name, "Sam Supplier")
        self.assertEqual(len(stocks.records), 3)

    # ---------- Products ----------

    async def test_autofill_from_stock(self):
        products = ProductAdminViewModel(self.api)
        self.assertTrue(await products.load_all())

        fill = products.autofill("stk-1")
        self.assertEqual(
            fill,
            ProductFormFill(
                category="Tools",
                quantity="3",
                supplier_name="Sam Supplier",
                company="Acme",
                contact="555-0100",
            ),
        )
        self.assertEqual(products.autofill("stk-404"), ProductFormFill())

    async def test_create_product_linked_to_stock(self):
        products = ProductAdminViewModel(self.api)
        await products.load_all()
        created = await products.create(
            ProductAdminViewModel.payload("Spanner", "Adjustable", 9.5, "stk-1")
        )
        self.assertEqual(created.stock.id, "stk-1")
        self.assertEqual(created.quantity, 3)
        self.assertEqual(len(products.records), 3)


if __name__ == "__main__":
    unittest.main()
