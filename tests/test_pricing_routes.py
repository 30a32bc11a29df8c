"""Tests for /api/pricing and /api/customer-context over a fixture provider."""

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

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "store.json"


def _client(failures=None) -> TestClient:
    return TestClient(create_app(provider=FixtureCatalogProvider.from_file(FIXTURE, failures=failures)))


class TestPricingRoute(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = _client()

    def test_guest_quote(self):
        r = self.client.get("/api/pricing", params={"productId": "101"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["productId"], "101")
        self.assertEqual(body["userGroup"], "guest")
        self.assertEqual(body["prices"]["final"], 18.0)
        self.assertEqual(body["currency"], "USD")
        self.assertEqual(len(body["quantityBreaks"]), 2)
        self.assertNotIn("diagnostics", body)
        self.assertEqual(r.headers["cache-control"], "private, max-age=120")

    def test_group_variant_and_quantity(self):
        r = self.client.get(
            "/api/pricing",
            params={"productId": "101", "variantId": "1001", "customerGroup": "Wholesale Buyers", "quantity": "10"},
        )
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["priceListPrice"], 16.5)
        self.assertEqual(body["quantityBreakPrice"], 18.9)
        self.assertEqual(body["prices"]["final"], 18.9)
        self.assertEqual(body["quantity"], 10)

    def test_user_group_alias_and_tags(self):
        r = self.client.get(
            "/api/pricing",
            params={"productId": "102", "userGroup": "vip", "customerTags": "gold, ,net30"},
        )
        body = r.json()
        self.assertEqual(body["prices"]["final"], 45.0)
        self.assertEqual(body["customerTags"], ["gold", "net30"])

    def test_invalid_quantity_defaults_to_one(self):
        r = self.client.get("/api/pricing", params={"productId": "101", "quantity": "lots"})
        self.assertEqual(r.json()["quantity"], 1)

    def test_missing_product_id(self):
        r = self.client.get("/api/pricing")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"success": False, "error": "productId is required"})

    def test_unknown_product(self):
        r = self.client.get("/api/pricing", params={"productId": "999"})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["error"], "Product not found")

    def test_unknown_variant(self):
        r = self.client.get("/api/pricing", params={"productId": "101", "variantId": "5"})
        self.assertEqual(r.status_code, 404)

    def test_product_lookup_failure_is_server_error(self):
        client = _client(failures={"get_product": UpstreamUnavailable("down", 503)})
        r = client.get("/api/pricing", params={"productId": "101"})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["error"], "Internal server error")

    def test_optional_stage_failure_still_quotes(self):
        client = _client(failures={"list_price_lists": UpstreamUnavailable("not licensed", 403)})
        r = client.get("/api/pricing", params={"productId": "101", "customerGroup": "wholesale buyers"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["prices"]["final"], 18.0)


class TestCustomerContextRoute(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = _client()

    def test_logged_in_customer(self):
        r = self.client.get("/api/customer-context", params={"customerId": "7"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["customerId"], "7")
        self.assertEqual(body["customerGroup"], "wholesale buyers")
        self.assertTrue(body["isWholesale"])
        self.assertTrue(body["isLoggedIn"])
        self.assertEqual(r.headers["cache-control"], "private, no-cache")

    def test_guest(self):
        body = self.client.get("/api/customer-context").json()
        self.assertIsNone(body["customerId"])
        self.assertFalse(body["isLoggedIn"])
        self.assertEqual(body["customerGroup"], "guest shoppers")

    def test_upstream_failure_still_answers(self):
        client = _client(failures={"get_customer": UpstreamUnavailable("down", 500)})
        r = client.get("/api/customer-context", params={"customerId": "7"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["customerGroup"], "guest")


class TestHealth(unittest.TestCase):
    def test_health(self):
        r = _client().get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
