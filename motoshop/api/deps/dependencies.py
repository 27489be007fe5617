"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: motoshop.configs, motoshop.application, motoshop.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Header, HTTPException, status

from motoshop.application.services import JobService, JobSynchronizer, QuickNoteService, ShopService
from motoshop.boundary.db.connection import get_async_engine, get_async_session_factory
from motoshop.boundary.gateway import ChangeFeed, DataGateway, SqlDataGateway
from motoshop.boundary.identity import IdentityResolver
from motoshop.boundary.storage import S3PhotoStorage
from motoshop.configs import get_settings
from motoshop.core.access import Caller
from motoshop.core.exceptions import RemoteFailure
from motoshop.core.job_lifecycle import PhotoRules


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._engine = None
        self._change_feed = None
        self._gateway = None
        self._synchronizer = None
        self._storage = None

    @property
    def engine(self):
        """Get cached async engine."""
        if self._engine is None:
            self._engine = get_async_engine()
        return self._engine

    @property
    def change_feed(self) -> ChangeFeed:
        """Get cached change feed."""
        if self._change_feed is None:
            self._change_feed = ChangeFeed()
        return self._change_feed

    @property
    def gateway(self) -> DataGateway:
        """Get cached SQL data gateway."""
        if self._gateway is None:
            self._gateway = SqlDataGateway(
                get_async_session_factory(self.engine),
                change_feed=self.change_feed,
            )
        return self._gateway

    @property
    def synchronizer(self) -> JobSynchronizer:
        """Get cached job synchronizer; its local cache lives as long as the process."""
        if self._synchronizer is None:
            lifecycle = get_settings().job_lifecycle
            self._synchronizer = JobSynchronizer(
                self.gateway,
                rules=PhotoRules(
                    min_start_photos=lifecycle.min_start_photos,
                    min_completion_photos=lifecycle.min_completion_photos,
                ),
                rollback_on_failure=lifecycle.rollback_on_remote_failure,
            )
        return self._synchronizer

    @property
    def storage(self) -> S3PhotoStorage:
        """Get cached S3 photo storage."""
        if self._storage is None:
            settings = get_settings()
            self._storage = S3PhotoStorage(
                bucket=settings.s3_photos.bucket,
                region=settings.s3_photos.region,
                public_base_url=settings.s3_photos.public_base_url,
            )
        return self._storage

    async def dispose(self) -> None:
        """Release the database engine and clear all cached instances."""
        if self._synchronizer is not None:
            self._synchronizer.detach_change_feed()
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._engine = None
        self._change_feed = None
        self._gateway = None
        self._synchronizer = None
        self._storage = None


# Global service cache
_service_cache = ServiceCache()

def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_gateway() -> DataGateway:
    """
    Get data gateway instance.

    Returns:
        DataGateway: Shared SQL gateway
    """
    return get_service_cache().gateway


def get_identity_resolver(gateway: DataGateway = Depends(get_gateway)) -> IdentityResolver:
    return IdentityResolver(gateway)


def get_job_service(gateway: DataGateway = Depends(get_gateway)) -> JobService:
    """
    Get job service instance.

    Args:
        gateway: Data gateway (injected via Depends)

    Returns:
        JobService: Job service bound to the shared synchronizer and storage
    """
    cache = get_service_cache()
    return JobService(cache.synchronizer, gateway, storage=cache.storage)


def get_shop_service(gateway: DataGateway = Depends(get_gateway)) -> ShopService:
    """
    Get shop service instance.

    Args:
        gateway: Data gateway (injected via Depends)

    Returns:
        ShopService: Shop service instance
    """
    return ShopService(gateway)



def get_quick_note_service(gateway: DataGateway = Depends(get_gateway)) -> QuickNoteService:
    return QuickNoteService(gateway)


async def get_current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    identity: IdentityResolver = Depends(get_identity_resolver),
) -> Caller:
    """
    Resolve the caller from the identity headers set by the auth proxy.

    Raises:
        HTTPException(401): No identity, or unknown identity without email
        HTTPException(502): Profile lookup failed
    """
    try:
        caller = await identity.current_caller(x_user_id, x_user_email)
    except RemoteFailure as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": e.message, "details": e.details},
        )
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Authentication required"},
        )
    return caller
