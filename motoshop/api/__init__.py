"""HTTP API for the motorcycle shop service."""
