"""
Job service orchestrator.

Coordinates job intake, listing, evidence uploads, status changes and
deletion on behalf of an explicit caller. Visibility checks happen here;
persistence rules live in JobSynchronizer.

Dependencies: motoshop.application.services.job_sync, motoshop.boundary,
motoshop.core
System role: Job use case orchestration
"""

import logging
import uuid
from dataclasses import dataclass

from motoshop.application.services.job_sync import (
    CostResult,
    DeletionResult,
    JobSynchronizer,
    PhotoResult,
    TransitionResult,
)
from motoshop.boundary.gateway.protocol import DataGateway
from motoshop.boundary.storage.s3_client import S3PhotoStorage
from motoshop.core.access import (
    Caller,
    can_see_all_jobs,
    ensure_can_view,
    visibility_filters,
)
from motoshop.core.exceptions import (
    JobNotFoundError,
    PermissionDenied,
    RemoteFailure,
    ShopNotFoundError,
    ValidationError,
)
from motoshop.core.job_lifecycle import (
    Customer,
    DeletionTicket,
    JobRecord,
    JobStatus,
    Motorcycle,
    PhotoKind,
    SearchScope,
    ServiceType,
    parse_cost,
)
from motoshop.core.job_lifecycle.identifiers import generate_job_id, generate_tracking_id
from motoshop.core.job_lifecycle.records import utc_now
from motoshop.core.job_lifecycle.search import normalize_query, search_jobs as match_jobs

logger = logging.getLogger(__name__)

PHOTO_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "image/gif": ".gif",
}
ALLOWED_PHOTO_TYPES = frozenset(PHOTO_EXTENSIONS)


@dataclass(frozen=True)
class JobListing:
    """Jobs visible to a caller, split by whether work is finished."""

    active: list[JobRecord]
    completed: list[JobRecord]


class JobService:
    """Job service orchestrator."""

    def __init__(
        self,
        synchronizer: JobSynchronizer,
        gateway: DataGateway,
        storage: S3PhotoStorage | None = None,
    ) -> None:
        """
        Initialize job service.

        Args:
            synchronizer: Persistence synchronizer for jobs
            gateway: Data gateway for shop lookups and tracking queries
            storage: Photo storage (photo uploads disabled if None)
        """
        self.synchronizer = synchronizer
        self._gateway = gateway
        self._storage = storage

    async def _visible_job(self, caller: Caller, job_id: str) -> JobRecord:
        job = await self.synchronizer.load(job_id)
        ensure_can_view(caller, job)
        return job

    async def create_job(
        self,
        caller: Caller,
        customer: dict,
        motorcycle: dict,
        service_type: str,
        description: str | None = None,
        estimated_cost: str | None = None,
        shop_id: str | None = None,
    ) -> JobRecord:
        """
        Take in a new job.

        The job is assigned to the caller's shop unless an admin or
        support user names another one.

        Raises:
            ValidationError: Missing customer email or unknown service type
            PermissionDenied: Caller may not create jobs for shop_id, or has
                no approved shop membership
            ShopNotFoundError: shop_id does not exist
        """
        if not service_type:
            raise ValidationError("Service type is required", field="service_type")
        try:
            service = ServiceType(service_type)
        except ValueError:
            raise ValidationError(
                f"Unknown service type: {service_type}",
                field="service_type",
                details={"allowed": [s.value for s in ServiceType]},
            )

        if shop_id is None:
            shop_id = caller.shop_id if caller.membership_approved else None
        elif shop_id != caller.shop_id and not can_see_all_jobs(caller):
            raise PermissionDenied(
                f"Not allowed to create jobs for shop {shop_id}",
                {"user_id": caller.id, "shop_id": shop_id},
            )
        if shop_id is None and not can_see_all_jobs(caller):
            raise PermissionDenied(
                "An approved shop membership is required to create jobs",
                {"user_id": caller.id},
            )
        if shop_id is not None and await self._gateway.get("shops", shop_id) is None:
            raise ShopNotFoundError(shop_id)

        customer_fields = {k: v for k, v in (customer or {}).items() if v not in (None, "")}
        if not customer_fields.get("email"):
            raise ValidationError("Customer email is required", field="customer.email")
        customer_fields["tracking_id"] = customer_fields.get("tracking_id") or generate_tracking_id()

        job = JobRecord(
            id=generate_job_id(),
            customer=Customer(**customer_fields),
            motorcycle=Motorcycle(**(motorcycle or {})),
            service_type=service,
            status=JobStatus.PENDING,
            date_created=utc_now(),
            shop_id=shop_id,
            created_by=caller.id,
            initial_cost=parse_cost(estimated_cost, "estimated_cost"),
            description=description.strip() if description else None,
        )
        return await self.synchronizer.create_job(job)

    async def list_jobs(self, caller: Caller) -> JobListing:
        """
        List the jobs the caller may see, newest first.

        Raises:
            PermissionDenied: Caller has no approved shop membership
        """
        jobs = await self.synchronizer.list_jobs(filters=visibility_filters(caller))
        return JobListing(
            active=[job for job in jobs if job.status is not JobStatus.COMPLETED],
            completed=[job for job in jobs if job.status is JobStatus.COMPLETED],
        )

    async def search_jobs(self, caller: Caller, query: str, scope: str = SearchScope.ALL.value) -> list[JobRecord]:
        """
        Find visible jobs whose customer, motorcycle or id contains query.

        Raises:
            ValidationError: Empty query or unknown scope
            PermissionDenied: Caller has no approved shop membership
        """
        try:
            search_scope = SearchScope(scope)
        except ValueError:
            raise ValidationError(
                f"Unknown search scope: {scope}",
                field="scope",
                details={"allowed": [s.value for s in SearchScope]},
            )
        normalize_query(query)
        jobs = await self.synchronizer.list_jobs(filters=visibility_filters(caller))
        found = match_jobs(jobs, query, search_scope)
        logger.info(
            "Job search",
            extra={"scope": search_scope.value, "matches": len(found), "candidates": len(jobs)},
        )
        return found

    async def get_job(self, caller: Caller, job_id: str) -> JobRecord:
        return await self._visible_job(caller, job_id)

    async def add_note(self, caller: Caller, job_id: str, text: str) -> JobRecord:
        await self._visible_job(caller, job_id)
        return await self.synchronizer.add_note(job_id, text, author=caller.author)

    async def set_costs(
        self,
        caller: Caller,
        job_id: str,
        initial_cost: str | None = None,
        final_cost: str | None = None,
    ) -> CostResult:
        await self._visible_job(caller, job_id)
        return await self.synchronizer.set_costs(job_id, initial_cost=initial_cost, final_cost=final_cost)

    async def request_transition(self, caller: Caller, job_id: str, status: str) -> TransitionResult:
        await self._visible_job(caller, job_id)
        try:
            target = JobStatus(status)
        except ValueError:
            raise ValidationError(
                f"Unknown status: {status}",
                field="status",
                details={"allowed": [s.value for s in JobStatus]},
            )
        return await self.synchronizer.request_transition(job_id, target)

    async def retry_sync(self, caller: Caller, job_id: str) -> JobRecord:
        """
        Re-send the job's last failed write.

        Raises:
            RemoteFailure: Write rejected again; the local change is kept
        """
        await self._visible_job(caller, job_id)
        return await self.synchronizer.retry_job(job_id)

    async def upload_photo(
        self,
        caller: Caller,
        job_id: str,
        kind: str,
        blob: bytes,
        content_type: str | None,
        filename: str | None = None,
    ) -> PhotoResult:
        """
        Store a photo and attach its URL to the job.

        The stored object is removed again when the job update fails and
        the local copy does not reference it.

        Raises:
            ValidationError: Empty file, unsupported type or unknown kind
            RemoteFailure: Storage or gateway write failed
        """
        if self._storage is None:
            raise RemoteFailure("Photo storage is not configured", operation="upload")
        photo_kind = _photo_kind(kind)
        if not blob:
            raise ValidationError("Photo file is empty", field="file")
        if content_type not in ALLOWED_PHOTO_TYPES:
            raise ValidationError(
                f"Unsupported photo type: {content_type}",
                field="file",
                details={"allowed": sorted(ALLOWED_PHOTO_TYPES)},
            )

        await self._visible_job(caller, job_id)
        path = f"jobs/{job_id}/{photo_kind.value}/{uuid.uuid4()}{PHOTO_EXTENSIONS[content_type]}"
        url = await self._storage.upload(path, blob, content_type)
        logger.info(
            "Photo stored",
            extra={"job_id": job_id, "s3_key": path, "original_filename": filename},
        )

        try:
            return await self.synchronizer.add_photo(job_id, photo_kind, url)
        except Exception:
            cached = self.synchronizer.peek(job_id)
            if cached is None or url not in cached.photos.of(photo_kind):
                await self._discard_object(path, job_id)
            raise

    async def remove_photo(self, caller: Caller, job_id: str, kind: str, index: int) -> JobRecord:
        await self._visible_job(caller, job_id)
        job, removed = await self.synchronizer.remove_photo(job_id, _photo_kind(kind), index)

        key = self._storage.key_for_url(removed) if self._storage else None
        if key is not None:
            await self._discard_object(key, job_id)
        return job

    async def _discard_object(self, path: str, job_id: str) -> None:
        try:
            await self._storage.remove(path)
        except RemoteFailure as e:
            logger.warning(
                "Stored photo left behind",
                extra={"job_id": job_id, "s3_key": path, "error": e.message},
            )

    async def begin_deletion(self, caller: Caller, job_id: str) -> DeletionTicket:
        await self._visible_job(caller, job_id)
        return await self.synchronizer.begin_deletion(job_id)

    async def confirm_deletion(self, caller: Caller, job_id: str, ticket_id: str) -> DeletionResult:
        await self._visible_job(caller, job_id)
        return await self.synchronizer.confirm_deletion(job_id, ticket_id)

    async def cancel_deletion(self, caller: Caller, job_id: str, ticket_id: str) -> None:
        await self._visible_job(caller, job_id)
        self.synchronizer.cancel_deletion(job_id, ticket_id)

    async def track_job(self, code: str) -> JobRecord:
        """
        Public lookup used by the customer tracking page.

        Tries the job id as given, then upper-cased, then as a customer
        tracking code.

        Raises:
            JobNotFoundError: Nothing matches code
        """
        code = (code or "").strip()
        if not code:
            raise JobNotFoundError(code)

        candidates = [("id", code)]
        if code.upper() != code:
            candidates.append(("id", code.upper()))
        candidates.append(("tracking_id", code.upper()))

        for column, value in candidates:
            rows = await self._gateway.select("jobs", filters={column: value}, limit=1)
            if rows:
                return JobRecord.from_row(rows[0])

        logger.info("Tracking lookup found nothing", extra={"code": code})
        raise JobNotFoundError(code)


def _photo_kind(kind: str) -> PhotoKind:
    try:
        return PhotoKind(kind)
    except ValueError:
        raise ValidationError(
            f"Unknown photo kind: {kind}",
            field="kind",
            details={"allowed": [k.value for k in PhotoKind]},
        )
