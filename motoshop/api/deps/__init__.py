"""Dependency injection for API routers."""
