"""Tests for loader script install/cleanup and store install lifecycle."""

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
from product_tables.bigcommerce.scripts import (
    LOADER_SCRIPT_NAME,
    build_loader_script,
    cleanup_loader_scripts,
    ensure_loader_script,
    loader_script_src,
)
from product_tables.db import init_db
from product_tables.db.repositories import store_repo
from product_tables.errors import NotFound, UpstreamUnavailable
from product_tables.stores import install_store, uninstall_store

SCRIPT_SRC = "https://app.example.com/widget-loader.js?v=1.0.58"


class TestEnsureLoaderScript(unittest.TestCase):
    def test_loader_script_src(self):
        self.assertEqual(loader_script_src("https://app.example.com/", "2.0.0"), "https://app.example.com/widget-loader.js?v=2.0.0")

    def test_payload(self):
        payload = build_loader_script(SCRIPT_SRC)
        self.assertEqual(payload["name"], LOADER_SCRIPT_NAME)
        self.assertEqual(payload["src"], SCRIPT_SRC)
        self.assertEqual(payload["kind"], "src")
        self.assertEqual(payload["location"], "footer")

    def test_installs_once(self):
        provider = FixtureCatalogProvider()
        first = asyncio.run(ensure_loader_script(provider, SCRIPT_SRC))
        self.assertEqual(first.status, "installed")
        self.assertTrue(first.script_uuid)
        second = asyncio.run(ensure_loader_script(provider, SCRIPT_SRC))
        self.assertEqual(second.status, "already_installed")
        self.assertEqual(len(provider.scripts), 1)

    def test_list_failure_is_tolerated(self):
        provider = FixtureCatalogProvider(failures={"list_scripts": UpstreamUnavailable("down", 500)})
        result = asyncio.run(ensure_loader_script(provider, SCRIPT_SRC))
        self.assertEqual(result.status, "installed")

    def test_create_failure_is_manual(self):
        provider = FixtureCatalogProvider(failures={"create_script": UpstreamUnavailable("down", 500)})
        result = asyncio.run(ensure_loader_script(provider, SCRIPT_SRC))
        self.assertEqual(result.status, "manual")
        self.assertEqual(result.script_src, SCRIPT_SRC)

    def test_auth_failure(self):
        provider = FixtureCatalogProvider(failures={"create_script": UpstreamUnavailable("forbidden", 403)})
        result = asyncio.run(ensure_loader_script(provider, SCRIPT_SRC))
        self.assertEqual(result.status, "auth_required")


class TestCleanupLoaderScripts(unittest.TestCase):
    def _provider(self, failures=None):
        return FixtureCatalogProvider(
            {
                "scripts": [
                    {"uuid": "s-1", "name": "Product Table Widget Loader"},
                    {"uuid": "s-2", "name": "Product Table Widget Loader (old)"},
                    {"uuid": "s-3", "name": "Chat"},
                ]
            },
            failures=failures,
        )

    def test_deletes_matching(self):
        provider = self._provider()
        result = asyncio.run(cleanup_loader_scripts(provider))
        self.assertEqual([d["uuid"] for d in result.deleted], ["s-1", "s-2"])
        self.assertEqual(len(result.all_scripts), 3)
        self.assertEqual([s["uuid"] for s in provider.scripts], ["s-3"])

    def test_collects_failures(self):
        provider = self._provider(failures={"delete_script:s-2": NotFound("gone")})
        result = asyncio.run(cleanup_loader_scripts(provider))
        self.assertEqual([d["uuid"] for d in result.deleted], ["s-1"])
        self.assertEqual(result.failed[0]["uuid"], "s-2")
        self.assertIn("gone", result.failed[0]["error"])

    def test_listing_failure_propagates(self):
        provider = self._provider(failures={"list_scripts": UpstreamUnavailable("down", 502)})
        with self.assertRaises(UpstreamUnavailable):
            asyncio.run(cleanup_loader_scripts(provider))


class TestStoreLifecycle(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def test_install_injects_loader(self):
        provider = FixtureCatalogProvider()
        store, script = asyncio.run(
            install_store("lifecycle-store", "tok", scopes=["store_v2_content"], provider=provider, app_url="https://app.example.com")
        )
        self.assertTrue(store.is_installed)
        self.assertEqual(store.scopes, ["store_v2_content"])
        self.assertEqual(script.status, "installed")
        self.assertTrue(script.script_src.startswith("https://app.example.com/widget-loader.js?v="))

    def test_install_without_app_url(self):
        provider = FixtureCatalogProvider()
        store, script = asyncio.run(install_store("lifecycle-no-url", "tok", provider=provider, app_url=""))
        self.assertIsNone(script)
        self.assertEqual(provider.calls, [])
        self.assertEqual(store.store_hash, "lifecycle-no-url")

    def test_install_persists_and_reinstall_updates_token(self):
        asyncio.run(install_store("lifecycle-reinstall", "tok-1", provider=FixtureCatalogProvider(), app_url=""))
        store, _ = asyncio.run(
            install_store("lifecycle-reinstall", "tok-2", scopes=["store_v2_products"], provider=FixtureCatalogProvider(), app_url="")
        )
        saved = store_repo.get_by_hash("lifecycle-reinstall")
        self.assertEqual(saved.id, store.id)
        self.assertEqual(saved.access_token, "tok-2")
        self.assertEqual(saved.scopes, ["store_v2_products"])

    def test_uninstall(self):
        asyncio.run(install_store("lifecycle-uninstall", "tok", provider=FixtureCatalogProvider(), app_url=""))
        store = uninstall_store("lifecycle-uninstall")
        self.assertFalse(store.is_installed)
        self.assertIsNone(uninstall_store("lifecycle-never"))


if __name__ == "__main__":
    unittest.main()
