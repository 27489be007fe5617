"""
Data access gateway.

Exports:
  - DataGateway, Subscription: Gateway interface
  - ChangeEvent, ChangeKind, Record: Gateway data shapes
  - ChangeFeed: In-process change notification fan-out
  - SqlDataGateway: SQLAlchemy implementation

Dependencies: sqlalchemy, motoshop.boundary.db
System role: Persistence boundary consumed by the application layer
"""

from motoshop.boundary.gateway.change_feed import ChangeFeed
from motoshop.boundary.gateway.protocol import (
    ChangeCallback,
    ChangeEvent,
    ChangeKind,
    DataGateway,
    Record,
    Subscription,
)
from motoshop.boundary.gateway.sql_gateway import SqlDataGateway, model_to_record

__all__ = [
    "ChangeCallback",
    "ChangeEvent",
    "ChangeFeed",
    "ChangeKind",
    "DataGateway",
    "Record",
    "SqlDataGateway",
    "Subscription",
    "model_to_record",
]
