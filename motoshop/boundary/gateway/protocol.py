"""
Data access gateway interface.

Generic create/read/update/delete/subscribe operations on named record
collections. Records are plain dicts keyed by column name, so the core
never depends on a particular persistence technology.

Dependencies: abc
System role: Contract between the job lifecycle core and persistence
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

Record = dict[str, Any]


class ChangeKind(str, enum.Enum):
    """Kind of write a change notification describes."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    """
    Push notification for one committed write.

    Attributes:
        collection: Collection name (jobs, shops, ...)
        kind: Insert, update or delete
        record_id: Primary key of the affected record
        record: Full record after the write; None for deletes
    """

    collection: str
    kind: ChangeKind
    record_id: str
    record: Record | None = None


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription(ABC):
    """Handle returned by subscribe_to_changes."""

    @abstractmethod
    def unsubscribe(self) -> None:
        """Stop delivering notifications to the callback."""


class DataGateway(ABC):
    """
    Persistence gateway used by the application layer.

    Implementations raise RemoteFailure when the backing store fails and
    NotFound when an update or delete targets a missing record.
    """

    @abstractmethod
    async def insert(self, collection: str, record: Record) -> Record:
        """Insert record and return it as stored."""

    @abstractmethod
    async def update(self, collection: str, record_id: str, fields: Record) -> None:
        """Apply a field-level update to one record."""

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        """Delete one record."""

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> Record | None:
        """Fetch one record by id, None when absent."""

    @abstractmethod
    async def select(
        self,
        collection: str,
        filters: Record | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        """List records matching equality filters."""

    @abstractmethod
    def subscribe_to_changes(
        self,
        collection: str,
        filters: Record | None,
        callback: ChangeCallback,
    ) -> Subscription:
        """Register callback for committed writes on collection."""
