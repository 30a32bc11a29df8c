"""API routers: storefront proxy routes and admin API."""
