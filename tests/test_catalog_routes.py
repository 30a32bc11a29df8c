"""Tests for the catalog proxy routes: products, collections, category resolution, cart."""

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
from product_tables.errors import UpstreamUnavailable
from product_tables.server import create_app
from product_tables.server.routers.catalog_routes import build_product_query, extract_slug

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "store.json"


def _setup(failures=None):
    provider = FixtureCatalogProvider.from_file(FIXTURE, failures=failures)
    return provider, TestClient(create_app(provider=provider))


class TestProductsRoute(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.provider, cls.client = _setup()

    def test_category_filter(self):
        r = self.client.get("/api/products", params={"category": "10"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual([p["id"] for p in body["products"]], [101, 103])
        self.assertEqual(body["pagination"]["total"], 2)
        self.assertEqual(r.headers["cache-control"], "public, max-age=300")

    def test_collection_is_category(self):
        body = self.client.get("/api/products", params={"collection": "11"}).json()
        self.assertEqual([p["id"] for p in body["products"]], [102])

    def test_search(self):
        body = self.client.get("/api/products", params={"search": "gadget"}).json()
        self.assertEqual([p["name"] for p in body["products"]], ["Pocket Gadget"])

    def test_limit_is_capped(self):
        body = self.client.get("/api/products", params={"limit": 1000}).json()
        self.assertEqual(body["pagination"]["per_page"], 250)

    def test_pagination(self):
        body = self.client.get("/api/products", params={"limit": 2, "page": 2}).json()
        self.assertEqual(len(body["products"]), 1)
        self.assertEqual(body["pagination"]["current_page"], 2)
        self.assertEqual(body["pagination"]["total_pages"], 2)

    def test_group_price_list_applied(self):
        body = self.client.get("/api/products", params={"customerGroupId": 5}).json()
        by_id = {p["id"]: p for p in body["products"]}
        self.assertEqual(by_id[101]["calculated_price"], 15.0)
        variants = {v["id"]: v for v in by_id[101]["variants"]}
        self.assertEqual(variants[1001]["calculated_price"], 16.5)
        self.assertEqual(variants[1002]["calculated_price"], 15.0)
        self.assertEqual(by_id[102]["calculated_price"], 50.0)

    def test_upstream_failure(self):
        _, client = _setup(failures={"list_products": UpstreamUnavailable("down", 502)})
        r = client.get("/api/products")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"success": False, "error": "Failed to fetch products"})

    def test_build_product_query(self):
        params = build_product_query("10", "bolt", 1, 25, "price-desc")
        self.assertEqual(params["categories:in"], "10")
        self.assertEqual(params["keyword"], "bolt")
        self.assertEqual((params["sort"], params["direction"]), ("price", "desc"))
        self.assertEqual(build_product_query(None, None, 1, 25, "bogus")["sort"], "name")


class TestCollectionsRoute(unittest.TestCase):
    def test_lists_categories(self):
        _, client = _setup()
        body = client.get("/api/collections").json()
        self.assertTrue(body["success"])
        self.assertEqual([c["name"] for c in body["collections"]], ["Hardware", "Gadgets"])


class TestResolveCategoryRoute(unittest.TestCase):
    def test_resolves_url_and_caches(self):
        provider, client = _setup()
        r = client.get("/api/resolve-category", params={"url": "https://demo-hardware.example.com/hardware/"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["categoryId"], "10")
        self.assertNotIn("cached", r.json())

        again = client.get("/api/resolve-category", params={"slug": "Hardware"})
        self.assertEqual(again.json()["categoryId"], "10")
        self.assertTrue(again.json()["cached"])
        self.assertEqual(provider.call_count("list_categories"), 1)

    def test_nested_path(self):
        _, client = _setup()
        body = client.get("/api/resolve-category", params={"url": "/shop/gadgets/"}).json()
        self.assertEqual(body["categoryName"], "Gadgets")

    def test_unknown_slug(self):
        _, client = _setup()
        r = client.get("/api/resolve-category", params={"slug": "garden"})
        self.assertEqual(r.status_code, 404)
        self.assertFalse(r.json()["success"])
        self.assertEqual(len(r.json()["availableCategories"]), 2)

    def test_requires_url_or_slug(self):
        _, client = _setup()
        r = client.get("/api/resolve-category")
        self.assertEqual(r.status_code, 400)

    def test_extract_slug(self):
        self.assertEqual(extract_slug("https://x.example.com/shop/tools/", None), "tools")
        self.assertEqual(extract_slug("/tools", None), "tools")
        self.assertEqual(extract_slug(None, " /tools/ "), "tools")
        self.assertIsNone(extract_slug("https://x.example.com/", None))


class TestAddToCartRoute(unittest.TestCase):
    def test_creates_cart(self):
        provider, client = _setup()
        r = client.post("/api/add-to-cart", json={"productId": 101, "variantId": 1001, "quantity": 2})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        item = body["cart"]["line_items"]["physical_items"][0]
        self.assertEqual(item, {"quantity": 2, "product_id": 101, "variant_id": 1001})
        self.assertEqual(len(provider.carts), 1)

    def test_without_variant(self):
        _, client = _setup()
        body = client.post("/api/add-to-cart", json={"productId": 103, "variantId": "", "quantity": 1}).json()
        self.assertNotIn("variant_id", body["cart"]["line_items"]["physical_items"][0])

    def test_rejects_bad_quantity(self):
        _, client = _setup()
        r = client.post("/api/add-to-cart", json={"productId": 101, "quantity": 0})
        self.assertEqual(r.status_code, 422)


if __name__ == "__main__":
    unittest.main()
