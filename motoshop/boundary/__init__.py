"""
Boundary layer for external system integrations.

Handles all interactions with external systems (database, object storage,
identity). Provides the data access gateway the core is written against.
"""
