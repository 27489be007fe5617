"""
SQLAlchemy-backed data access gateway.

Maps named collections to CRUD singletons. Every call runs in its own
session and commits before returning, so each gateway call behaves
like one remote request. Committed writes are published on the change
feed.

Dependencies: sqlalchemy, motoshop.boundary.db, motoshop.boundary.gateway
System role: Production implementation of DataGateway
"""

import logging
import uuid
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from motoshop.boundary.db.base import Base
from motoshop.boundary.db.CRUD import (
    BaseCRUD,
    job_crud,
    membership_crud,
    profile_crud,
    quick_note_crud,
    shop_crud,
)
from motoshop.boundary.gateway.change_feed import ChangeFeed
from motoshop.boundary.gateway.protocol import (
    ChangeCallback,
    ChangeEvent,
    ChangeKind,
    DataGateway,
    Record,
    Subscription,
)
from motoshop.core.exceptions import NotFound, RemoteFailure

logger = logging.getLogger(__name__)

DEFAULT_COLLECTIONS: dict[str, BaseCRUD] = {
    "jobs": job_crud,
    "profiles": profile_crud,
    "shops": shop_crud,
    "shop_memberships": membership_crud,
    "quick_notes": quick_note_crud,
}


def model_to_record(instance: Base) -> Record:
    """Convert an ORM instance into a plain record dict."""
    record: Record = {}
    for attr in inspect(instance).mapper.column_attrs:
        value = getattr(instance, attr.key)
        if isinstance(value, uuid.UUID):
            value = str(value)
        record[attr.key] = value
    return record


class SqlDataGateway(DataGateway):
    """
    DataGateway over an async SQLAlchemy session factory.

    Attributes:
        change_feed: Feed receiving an event per committed write
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        change_feed: ChangeFeed | None = None,
        collections: dict[str, BaseCRUD] | None = None,
    ) -> None:
        """
        Initialize gateway.

        Args:
            session_factory: Async session factory bound to the database
            change_feed: Feed to publish writes on (new feed if None)
            collections: Collection name to CRUD mapping
        """
        self._session_factory = session_factory
        self.change_feed = change_feed or ChangeFeed()
        self._collections = collections or DEFAULT_COLLECTIONS

    def _crud(self, collection: str) -> BaseCRUD:
        try:
            return self._collections[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}")

    def _failure(self, operation: str, collection: str, error: Exception, **context: Any) -> RemoteFailure:
        logger.error(
            f"Gateway {operation} failed",
            extra={"collection": collection, "error_type": type(error).__name__, "error": str(error), **context},
        )
        return RemoteFailure(
            f"Could not {operation} {collection} record",
            operation=operation,
            details={"collection": collection, **context},
        )

    async def insert(self, collection: str, record: Record) -> Record:
        crud = self._crud(collection)
        try:
            async with self._session_factory() as session:
                instance = await crud.create(session, **record)
                stored = model_to_record(instance)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("insert", collection, e) from e

        record_id = str(stored["id"])
        logger.info("Record inserted", extra={"collection": collection, "record_id": record_id})
        self.change_feed.publish(ChangeEvent(collection, ChangeKind.INSERT, record_id, stored))
        return stored

    async def update(self, collection: str, record_id: str, fields: Record) -> None:
        if not fields:
            return
        crud = self._crud(collection)
        try:
            async with self._session_factory() as session:
                instance = await crud.update_by_id(session, record_id, **fields)
                if instance is None:
                    raise NotFound(collection, record_id)
                stored = model_to_record(instance)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("update", collection, e, record_id=record_id) from e

        logger.info(
            "Record updated",
            extra={"collection": collection, "record_id": record_id, "fields": sorted(fields)},
        )
        self.change_feed.publish(ChangeEvent(collection, ChangeKind.UPDATE, record_id, stored))

    async def delete(self, collection: str, record_id: str) -> None:
        crud = self._crud(collection)
        try:
            async with self._session_factory() as session:
                deleted = await crud.delete_by_id(session, record_id)
                if not deleted:
                    raise NotFound(collection, record_id)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete", collection, e, record_id=record_id) from e

        logger.info("Record deleted", extra={"collection": collection, "record_id": record_id})
        self.change_feed.publish(ChangeEvent(collection, ChangeKind.DELETE, record_id))

    async def get(self, collection: str, record_id: str) -> Record | None:
        crud = self._crud(collection)
        try:
            async with self._session_factory() as session:
                instance = await crud.get_by_id(session, record_id)
                return model_to_record(instance) if instance is not None else None
        except SQLAlchemyError as e:
            raise self._failure("fetch", collection, e, record_id=record_id) from e

    async def select(
        self,
        collection: str,
        filters: Record | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        crud = self._crud(collection)
        try:
            async with self._session_factory() as session:
                instances = await crud.find(
                    session,
                    filters=filters,
                    order_by=order_by,
                    descending=descending,
                    limit=limit,
                )
                return [model_to_record(instance) for instance in instances]
        except SQLAlchemyError as e:
            raise self._failure("list", collection, e) from e

    def subscribe_to_changes(
        self,
        collection: str,
        filters: Record | None,
        callback: ChangeCallback,
    ) -> Subscription:
        self._crud(collection)
        return self.change_feed.subscribe(collection, filters, callback)
