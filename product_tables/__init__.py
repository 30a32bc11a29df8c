"""Storefront product table widgets for BigCommerce: pricing, customer context and catalog proxy service."""

__version__ = "0.1.0"
