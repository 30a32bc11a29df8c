"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database (record store for product tables, widget instances, stores)
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'product_tables.db'}")

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv(
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "http://localhost:4318/v1/traces",
)
SERVICE_NAME = os.getenv("SERVICE_NAME", "product-tables")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# BigCommerce REST API
BIGCOMMERCE_API_URL = os.getenv("BIGCOMMERCE_API_URL", "https://api.bigcommerce.com").rstrip("/")
BIGCOMMERCE_STORE_HASH = os.getenv("BIGCOMMERCE_STORE_HASH", "")
BIGCOMMERCE_ACCESS_TOKEN = os.getenv("BIGCOMMERCE_ACCESS_TOKEN", "")
BIGCOMMERCE_TIMEOUT_SECONDS = float(os.getenv("BIGCOMMERCE_TIMEOUT_SECONDS", "30"))

# Public URL of this app (used for the storefront loader script src)
APP_URL = os.getenv("APP_URL", "").rstrip("/")

# Widget versions: loader cache-busting and the version reported by /api/version-check
WIDGET_LOADER_VERSION = os.getenv("WIDGET_LOADER_VERSION", "1.0.58")
LATEST_WIDGET_VERSION = os.getenv("LATEST_WIDGET_VERSION", "1.0.0")
LATEST_WIDGET_RELEASE_DATE = os.getenv("LATEST_WIDGET_RELEASE_DATE", "2025-01-01")

# HTTP server
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))

# Category slug resolution cache (seconds)
CATEGORY_CACHE_TTL_SECONDS = int(os.getenv("CATEGORY_CACHE_TTL_SECONDS", "300"))
