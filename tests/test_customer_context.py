"""Tests for customer context resolution and its guest fallbacks."""

import asyncio
import os
import sys
import tempfile
import unittest
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_test_db_file.name}")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from product_tables.bigcommerce.mock import FixtureCatalogProvider
from product_tables.errors import UpstreamUnavailable
from product_tables.resolvers.customer_context import resolve_customer_context

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "store.json"


def _resolve(customer_id=None, failures=None, provider=None):
    provider = provider or FixtureCatalogProvider.from_file(FIXTURE, failures=failures)
    return asyncio.run(resolve_customer_context(provider, customer_id))


class TestGuestContext(unittest.TestCase):
    def test_guest_uses_store_default_group(self):
        context = _resolve()
        self.assertEqual(context.customer_group, "guest shoppers")
        self.assertEqual(context.customer_group_id, 3)
        self.assertFalse(context.is_logged_in)
        self.assertFalse(context.is_wholesale)
        self.assertIsNone(context.customer_id)
        self.assertEqual(context.resolution.status, "resolved")

    def test_blank_customer_id_is_guest(self):
        self.assertIsNone(_resolve("  ").customer_id)

    def test_no_default_group_is_literal_guest(self):
        context = _resolve(provider=FixtureCatalogProvider({"store": {"default_customer_group_id": 0}}))
        self.assertEqual(context.customer_group, "guest")
        self.assertIsNone(context.customer_group_id)
        self.assertEqual(context.resolution.status, "guest_default")

    def test_store_lookup_failure_degrades(self):
        context = _resolve(failures={"get_store_default_guest_group_id": UpstreamUnavailable("down", 502)})
        self.assertEqual(context.customer_group, "guest")
        self.assertEqual(context.resolution.status, "degraded")

    def test_guest_group_lookup_failure_degrades(self):
        context = _resolve(failures={"get_customer_group:3": UpstreamUnavailable("down")})
        self.assertEqual(context.customer_group, "guest")
        self.assertIsNone(context.customer_group_id)
        self.assertEqual(context.resolution.status, "degraded")


class TestCustomerContext(unittest.TestCase):
    def test_wholesale_customer(self):
        context = _resolve("7")
        self.assertEqual(context.customer_id, "7")
        self.assertEqual(context.customer_group, "wholesale buyers")
        self.assertEqual(context.customer_group_id, 5)
        self.assertTrue(context.is_wholesale)
        self.assertTrue(context.is_logged_in)
        self.assertEqual(context.customer_tags, ["vip", "net30"])
        self.assertEqual(context.email, "buyer@example.com")
        self.assertEqual(context.name, "Pat Lee")

    def test_customer_without_group(self):
        context = _resolve(8)
        self.assertEqual(context.customer_group, "guest")
        self.assertIsNone(context.customer_group_id)
        self.assertFalse(context.is_wholesale)
        self.assertTrue(context.is_logged_in)
        self.assertEqual(context.name, "Sam")

    def test_group_without_name_keeps_defaults(self):
        context = _resolve("9")
        self.assertEqual(context.customer_group, "retail")
        self.assertEqual(context.customer_group_id, 6)
        self.assertTrue(context.is_wholesale)
        self.assertIsNone(context.name)

    def test_unknown_customer_is_guest(self):
        context = _resolve("404")
        self.assertEqual(context.customer_group, "guest")
        self.assertFalse(context.is_logged_in)
        self.assertEqual(context.resolution.status, "guest_default")

    def test_customer_lookup_failure_is_degraded_guest(self):
        context = _resolve("7", failures={"get_customer": UpstreamUnavailable("down", 500)})
        self.assertEqual(context.customer_group, "guest")
        self.assertIsNone(context.customer_id)
        self.assertEqual(context.resolution.status, "degraded")

    def test_group_lookup_failure_keeps_customer(self):
        context = _resolve("7", failures={"get_customer_group:5": UpstreamUnavailable("down")})
        self.assertEqual(context.customer_id, "7")
        self.assertEqual(context.customer_group, "retail")
        self.assertTrue(context.is_wholesale)
        self.assertEqual(context.customer_tags, ["vip", "net30"])
        self.assertEqual(context.resolution.status, "degraded")

    def test_serialized_shape(self):
        body = _resolve("7").model_dump(mode="json", by_alias=True)
        self.assertEqual(body["customerGroup"], "wholesale buyers")
        self.assertTrue(body["isWholesale"])
        self.assertNotIn("resolution", body)

    def test_repeated_resolution_is_identical(self):
        first, second = _resolve("7"), _resolve("7")
        self.assertEqual(first.model_dump(), second.model_dump())
        self.assertEqual(first.resolution, second.resolution)


if __name__ == "__main__":
    unittest.main()
