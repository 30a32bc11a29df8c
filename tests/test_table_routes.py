"""Tests for product table / widget configuration: admin CRUD and the public storefront routes."""

import os
import sys
import tempfile
import unittest
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_test_db_file.name}")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from product_tables.bigcommerce.mock import FixtureCatalogProvider
from product_tables.db import init_db
from product_tables.db.repositories import store_repo
from product_tables.models.tables import DEFAULT_COLUMNS
from product_tables.server import create_app

STORE_HASH = "tables-route-store"


class TestProductTableRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        store_repo.upsert_installed(STORE_HASH, "token-tables")
        cls.client = TestClient(create_app(provider=FixtureCatalogProvider()))

    def _create(self, **overrides):
        payload = {
            "productTableName": "Bulk Hardware",
            "displayFormat": "grouped-variants",
            "productSource": "specific-categories",
            "selectedCategories": [10],
            "placementLocation": "category",
            "targetWholesaleOnly": True,
        }
        payload.update(overrides)
        r = self.client.post("/admin/product-tables", params={"storeHash": STORE_HASH}, json=payload)
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def test_create_fills_defaults(self):
        record = self._create()
        self.assertTrue(record["productTableId"].startswith("product-table-"))
        self.assertEqual(record["columns"], DEFAULT_COLUMNS)
        self.assertEqual(record["columnsOrder"], DEFAULT_COLUMNS)
        self.assertEqual(record["version"], "1.0.30")
        self.assertEqual(record["itemsPerPage"], 25)
        self.assertTrue(record["isActive"])
        self.assertTrue(record["targetWholesaleOnly"])
        self.assertTrue(record["targetAllCustomers"])

    def test_public_config(self):
        record = self._create(columns=["name", "price"])
        r = self.client.get("/api/product-tables", params={"productTableId": record["productTableId"]})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["productTable"]["columns"], ["name", "price"])
        self.assertEqual(body["productTable"]["displayFormat"], "grouped-variants")
        self.assertNotIn("storeId", body["productTable"])
        self.assertEqual(r.headers["cache-control"], "public, max-age=300")

    def test_public_config_errors(self):
        self.assertEqual(self.client.get("/api/product-tables").status_code, 400)
        r = self.client.get("/api/product-tables", params={"productTableId": "product-table-missing"})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["error"], "Product Table not found or inactive")

    def test_update_and_deactivate(self):
        record = self._create()
        public_id = record["productTableId"]
        r = self.client.patch(f"/admin/product-tables/{public_id}", json={"itemsPerPage": 50, "isActive": False})
        self.assertEqual(r.status_code, 200)
        updated = r.json()
        self.assertEqual(updated["itemsPerPage"], 50)
        self.assertFalse(updated["isActive"])
        self.assertIsNotNone(updated["lastChecked"])
        self.assertEqual(updated["productTableName"], "Bulk Hardware")

        self.assertEqual(self.client.get("/api/product-tables", params={"productTableId": public_id}).status_code, 404)
        self.assertEqual(self.client.get(f"/admin/product-tables/{public_id}").status_code, 200)

    def test_update_cannot_change_public_id(self):
        record = self._create()
        public_id = record["productTableId"]
        r = self.client.patch(f"/admin/product-tables/{public_id}", json={"productTableId": "product-table-other"})
        self.assertEqual(r.json()["productTableId"], public_id)

    def test_rejects_invalid_display_format(self):
        r = self.client.post(
            "/admin/product-tables",
            params={"storeHash": STORE_HASH},
            json={"displayFormat": "grouped-collection"},
        )
        self.assertEqual(r.status_code, 422)

    def test_delete(self):
        public_id = self._create()["productTableId"]
        r = self.client.delete(f"/admin/product-tables/{public_id}")
        self.assertEqual(r.json(), {"deleted": True, "id": public_id})
        self.assertEqual(self.client.get(f"/admin/product-tables/{public_id}").status_code, 404)
        self.assertEqual(self.client.delete(f"/admin/product-tables/{public_id}").status_code, 404)

    def test_admin_list_scoped_to_store(self):
        self._create(productTableName="Listed Table")
        r = self.client.get("/admin/product-tables", params={"storeHash": STORE_HASH, "includeInactive": True})
        self.assertEqual(r.status_code, 200)
        self.assertIn("Listed Table", [t["productTableName"] for t in r.json()])
        self.assertEqual(self.client.get("/admin/product-tables", params={"storeHash": "no-such-store"}).status_code, 404)

    def test_dropdown_lists(self):
        record = self._create(productTableName="Dropdown Table")
        r = self.client.get("/api/product-tables-list", params={"storeHash": STORE_HASH})
        self.assertEqual(r.status_code, 200)
        options = {o["value"]: o for o in r.json()["productTables"]}
        self.assertEqual(options[record["productTableId"]]["label"], "Dropdown Table")
        self.assertEqual(options[record["productTableId"]]["caption"], "grouped-variants - category")

        page_builder = self.client.get("/api/page-builder-product-tables", params={"storeHash": STORE_HASH}).json()
        option = next(o for o in page_builder if o["value"] == record["productTableId"])
        self.assertEqual(option["caption"], "grouped-variants • category")

    def test_unidentified_store(self):
        r = self.client.get("/api/product-tables-list", params={"storeHash": "no-such-store"})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "Store not identified")


class TestWidgetRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        store_repo.upsert_installed(STORE_HASH, "token-tables")
        cls.client = TestClient(create_app(provider=FixtureCatalogProvider()))

    def _create(self, **overrides):
        payload = {"widgetName": "Legacy Widget", "productSource": "all-collections", "displayFormat": "grouped-collection"}
        payload.update(overrides)
        r = self.client.post("/admin/widgets", params={"storeHash": STORE_HASH}, json=payload)
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def test_create_and_fetch(self):
        record = self._create()
        self.assertTrue(record["widgetId"].startswith("widget-"))
        self.assertEqual(record["version"], "1.0.0")
        r = self.client.get(f"/api/widgets/{record['widgetId']}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["widget"]["widgetName"], "Legacy Widget")

    def test_missing_widget(self):
        self.assertEqual(self.client.get("/api/widgets/widget-missing").status_code, 404)

    def test_list(self):
        record = self._create(widgetName="Listed Widget")
        body = self.client.get("/api/widgets/list", params={"storeHash": STORE_HASH}).json()
        self.assertIn(record["widgetId"], [w["value"] for w in body["widgets"]])

    def test_version_check_stamps_widget(self):
        record = self._create()
        self.assertIsNone(record["lastChecked"])
        r = self.client.get("/api/version-check", params={"widgetId": record["widgetId"], "currentVersion": "0.9.0"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["updateAvailable"])
        self.assertFalse(body["requiredUpdate"])
        self.assertEqual(r.headers["cache-control"], "public, max-age=3600")
        stamped = self.client.get(f"/admin/widgets/{record['widgetId']}").json()
        self.assertIsNotNone(stamped["lastChecked"])

    def test_version_check_current(self):
        body = self.client.get("/api/version-check", params={"currentVersion": "99.0.0"}).json()
        self.assertFalse(body["updateAvailable"])


class TestStoreAdminRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        cls.provider = FixtureCatalogProvider()
        cls.client = TestClient(create_app(provider=cls.provider))

    def test_install_and_uninstall(self):
        r = self.client.post(
            "/admin/stores",
            json={"storeHash": "installed-via-admin", "accessToken": "tok", "scopes": ["store_v2_content"]},
        )
        self.assertEqual(r.status_code, 201, r.text)
        store = r.json()["store"]
        self.assertTrue(store["isInstalled"])
        self.assertEqual(store["scopes"], ["store_v2_content"])
        loader = r.json()["loaderScript"]
        if loader is not None:
            self.assertIn(loader["status"], ("installed", "already_installed"))

        hashes = [s["storeHash"] for s in self.client.get("/admin/stores").json()]
        self.assertIn("installed-via-admin", hashes)

        r = self.client.post("/admin/stores/installed-via-admin/uninstall")
        self.assertEqual(r.status_code, 200)
        self.assertFalse(r.json()["isInstalled"])

    def test_reinstall_refreshes_credentials(self):
        self.client.post("/admin/stores", json={"storeHash": "reinstalled-store", "accessToken": "old"})
        self.client.post("/admin/stores/reinstalled-store/uninstall")
        self.client.post("/admin/stores", json={"storeHash": "reinstalled-store", "accessToken": "new"})
        store = store_repo.get_by_hash("reinstalled-store")
        self.assertTrue(store.is_installed)
        self.assertEqual(store.access_token, "new")

    def test_uninstall_unknown(self):
        self.assertEqual(self.client.post("/admin/stores/never-installed/uninstall").status_code, 404)

    def test_install_requires_token(self):
        r = self.client.post("/admin/stores", json={"storeHash": "no-token", "accessToken": ""})
        self.assertEqual(r.status_code, 422)


if __name__ == "__main__":
    unittest.main()
