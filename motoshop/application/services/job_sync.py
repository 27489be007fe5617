"""
Job persistence synchronizer.

Applies every job mutation locally first, then writes only the changed
fields through the data gateway. Status changes pass through the
transition policy before anything is written.

Write flow:
    1. Evaluate the mutation against the current working copy
    2. Stage the new copy in the local cache (pending)
    3. Send the field-level update to the gateway
    4. Mark confirmed, or failed (optionally rolled back) on RemoteFailure

Reads are local first and then refreshed from the gateway; the remote
copy replaces the confirmed local one, and writes that have not been
confirmed yet are re-applied on top of it until they are retried.
Change feed notifications are merged the same way.

Dependencies: motoshop.boundary.gateway, motoshop.core.job_lifecycle
System role: Local-first optimistic persistence for jobs
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from motoshop.application.services.local_cache import CacheEntry, LocalJobCache, SyncState
from motoshop.boundary.gateway.protocol import (
    ChangeEvent,
    ChangeKind,
    DataGateway,
    Record,
    Subscription,
)
from motoshop.core.exceptions import (
    FinalCostRequired,
    InvalidTransition,
    JobNotFoundError,
    NotFound,
    PhotoRequirementNotMet,
    PreconditionError,
    RemoteFailure,
    TransitionInFlight,
    ValidationError,
)
from motoshop.core.job_lifecycle import (
    DeletionGate,
    DeletionTicket,
    JobRecord,
    JobStatus,
    Note,
    PhotoEvidenceTracker,
    PhotoKind,
    PhotoRules,
    changed_fields,
    evaluate_transition,
    parse_cost,
    utc_now,
)
from motoshop.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

JOBS = "jobs"


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a status change request."""

    job: JobRecord
    changed: bool
    note: Note | None = None


@dataclass(frozen=True)
class PhotoResult:
    """
    Outcome of a photo upload.

    Attributes:
        job: Job after the upload (and any automatic start)
        count: Photos now in the uploaded set
        status_changed: True when the upload moved the job to in-progress
    """

    job: JobRecord
    count: int
    status_changed: bool = False


@dataclass(frozen=True)
class CostResult:
    """
    Outcome of a cost edit.

    Attributes:
        job: Job after the edit (and any deferred completion)
        status_changed: True when a deferred completion went through
        deferred_error: Why a deferred completion is still refused
    """

    job: JobRecord
    status_changed: bool = False
    deferred_error: PreconditionError | None = None


@dataclass(frozen=True)
class DeletionResult:
    """State of a deletion request after a confirmation step."""

    ticket: DeletionTicket
    deleted: bool = False


@dataclass(frozen=True)
class RetryReport:
    """Result of re-sending failed writes."""

    confirmed: list[str]
    failed: dict[str, str]


class JobSynchronizer:
    """
    Keeps the local job cache and the remote jobs collection in step.

    Attributes:
        cache: Local job cache
        deletion: Two-step confirmation gate for job deletes
        rules: Photo minimums handed to the transition policy
    """

    def __init__(
        self,
        gateway: DataGateway,
        cache: LocalJobCache | None = None,
        rules: PhotoRules | None = None,
        rollback_on_failure: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize synchronizer.

        Args:
            gateway: Data access gateway for the jobs collection
            cache: Local cache (new empty cache if None)
            rules: Photo minimums (3/3 if None)
            rollback_on_failure: Restore the last confirmed copy when a
                remote write fails instead of keeping the local change
            clock: Time source for notes and completion dates
        """
        self._gateway = gateway
        self.cache = cache or LocalJobCache()
        self.rules = rules or PhotoRules()
        self.deletion = DeletionGate()
        self._rollback_on_failure = rollback_on_failure
        self._clock = clock
        self._in_flight: set[str] = set()
        self._deferred_completion: set[str] = set()
        self._subscription: Subscription | None = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def peek(self, job_id: str) -> JobRecord | None:
        """Cached copy of a job without contacting the gateway."""
        return self.cache.peek(job_id)

    def sync_state(self, job_id: str) -> SyncState | None:
        entry = self.cache.get(job_id)
        return entry.state if entry else None

    async def load(self, job_id: str) -> JobRecord:
        """
        Fetch a job, refreshing the cache from the gateway.

        A cached copy is returned when the gateway cannot be reached.

        Raises:
            JobNotFoundError: Job does not exist remotely
            RemoteFailure: Gateway failed and nothing is cached
        """
        cached = self.cache.peek(job_id)
        try:
            row = await self._gateway.get(JOBS, job_id)
        except RemoteFailure as e:
            if cached is None:
                raise
            log_with_context(
                logger,
                logging.WARNING,
                "Serving cached job, refresh failed",
                job_id=job_id,
                error=str(e),
            )
            return cached

        if row is None:
            self.cache.evict(job_id)
            raise JobNotFoundError(job_id)
        return self._refresh(JobRecord.from_row(row)).job

    async def list_jobs(
        self,
        filters: Record | None = None,
        order_by: str = "date_created",
        descending: bool = True,
    ) -> list[JobRecord]:
        """List jobs from the gateway and refresh each cached copy."""
        rows = await self._gateway.select(
            JOBS,
            filters=filters,
            order_by=order_by,
            descending=descending,
        )
        return [self._refresh(JobRecord.from_row(row)).job for row in rows]

    def _refresh(self, remote: JobRecord) -> CacheEntry:
        try:
            return self.cache.refresh(remote)
        except ValidationError as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Dropping unconfirmed job changes that conflict with the remote copy",
                job_id=remote.id,
                error=e.message,
            )
            return self.cache.put_confirmed(remote)

    async def _current(self, job_id: str) -> JobRecord:
        cached = self.cache.peek(job_id)
        if cached is not None:
            return cached
        return await self.load(job_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_job(self, job: JobRecord) -> JobRecord:
        """
        Insert a new job.

        Raises:
            ValidationError: Job is not a fresh pending job
            RemoteFailure: Insert rejected by the gateway
        """
        if job.status is not JobStatus.PENDING:
            raise ValidationError("New jobs start as pending", field="status")

        stored = await self._gateway.insert(JOBS, job.to_row())
        created = self.cache.put_confirmed(JobRecord.from_row(stored)).job
        log_with_context(
            logger,
            logging.INFO,
            "Job created",
            job_id=created.id,
            shop_id=created.shop_id,
            service_type=created.service_type.value,
        )
        return created

    async def _commit(self, updated: JobRecord, action: str) -> JobRecord:
        entry = self.cache.get(updated.id)
        base = entry.confirmed if entry else updated
        fields = changed_fields(base, updated)

        self.cache.stage(updated)
        if not fields:
            self.cache.confirm(updated.id)
            return updated

        try:
            await self._gateway.update(JOBS, updated.id, fields)
        except NotFound as e:
            self.cache.evict(updated.id)
            raise JobNotFoundError(updated.id) from e
        except RemoteFailure as e:
            if self._rollback_on_failure:
                self.cache.rollback(updated.id)
            else:
                self.cache.fail(updated.id, e.message)
            log_exception_with_context(
                logger,
                "Job write failed",
                e,
                job_id=updated.id,
                action=action,
                fields=sorted(fields),
                rolled_back=self._rollback_on_failure,
            )
            raise

        self.cache.confirm(updated.id)
        log_with_context(
            logger,
            logging.INFO,
            "Job updated",
            job_id=updated.id,
            action=action,
            fields=sorted(fields),
        )
        return updated

    async def add_note(self, job_id: str, text: str, author: str) -> JobRecord:
        """
        Append a note to the job's log.

        Raises:
            ValidationError: Empty note text
        """
        job = await self._current(job_id)
        note = Note(text=text.strip() if text else text, timestamp=self._clock(), author=author)
        return await self._commit(job.with_note(note), "add_note")

    async def set_costs(
        self,
        job_id: str,
        initial_cost: str | None = None,
        final_cost: str | None = None,
    ) -> CostResult:
        """
        Update the estimate and/or the final cost.

        None leaves a cost unchanged; an empty string clears it. When a
        completion was refused for a missing final cost, it is retried
        once the new cost is stored.

        Raises:
            ValidationError: Cost is not a non-negative number
        """
        job = await self._current(job_id)
        changes = {}
        if initial_cost is not None:
            changes["initial_cost"] = parse_cost(initial_cost, "initial_cost")
        if final_cost is not None:
            changes["final_cost"] = parse_cost(final_cost, "final_cost")
        job = await self._commit(replace(job, **changes), "set_costs")

        if job_id not in self._deferred_completion or job.final_cost is None:
            return CostResult(job=job)

        self._deferred_completion.discard(job_id)
        try:
            result = await self.request_transition(job_id, JobStatus.COMPLETED)
        except (PreconditionError, InvalidTransition) as e:
            log_with_context(
                logger,
                logging.INFO,
                "Deferred completion still refused",
                job_id=job_id,
                reason=type(e).__name__,
            )
            return CostResult(job=self.cache.peek(job_id) or job, deferred_error=e)
        return CostResult(job=result.job, status_changed=result.changed)

    async def request_transition(self, job_id: str, status: JobStatus | str) -> TransitionResult:
        """
        Move a job to a new status.

        Raises:
            TransitionInFlight: Another transition for this job is running
            PhotoRequirementNotMet: Not enough start/completion photos
            FinalCostRequired: Completion requested without a final cost;
                the completion is retried when the cost is set
            InvalidTransition: Status pair is not allowed
            RemoteFailure: Write rejected by the gateway
        """
        status = JobStatus(status)
        if job_id in self._in_flight:
            raise TransitionInFlight(job_id)

        self._in_flight.add(job_id)
        try:
            job = await self._current(job_id)
            try:
                outcome = evaluate_transition(job, status, now=self._clock(), rules=self.rules)
            except FinalCostRequired:
                self._deferred_completion.add(job_id)
                log_with_context(
                    logger,
                    logging.INFO,
                    "Completion deferred until final cost is set",
                    job_id=job_id,
                )
                raise

            if not outcome.changed:
                return TransitionResult(job=job, changed=False)

            updated = await self._commit(outcome.job, f"transition:{status.value}")
            self._deferred_completion.discard(job_id)
            log_with_context(
                logger,
                logging.INFO,
                "Job status changed",
                job_id=job_id,
                from_status=job.status.value,
                to_status=status.value,
            )
            return TransitionResult(job=updated, changed=True, note=outcome.note)
        finally:
            self._in_flight.discard(job_id)

    def is_completion_deferred(self, job_id: str) -> bool:
        return job_id in self._deferred_completion

    async def add_photo(self, job_id: str, kind: PhotoKind | str, reference: str) -> PhotoResult:
        """
        Append a photo reference and start the job when it is ready.

        A start photo on a pending job triggers the in-progress
        transition; it only goes through once the minimum is reached.
        """
        kind = PhotoKind(kind)
        job = await self._current(job_id)
        tracker = PhotoEvidenceTracker(job.photos, job.status)
        count = tracker.add(kind, reference)
        job = await self._commit(replace(job, photos=tracker.photos), f"add_photo:{kind.value}")

        if not tracker.should_auto_start(kind):
            return PhotoResult(job=job, count=count)

        try:
            result = await self.request_transition(job_id, JobStatus.IN_PROGRESS)
        except (PhotoRequirementNotMet, TransitionInFlight) as e:
            logger.debug(
                "Automatic start skipped",
                extra={"job_id": job_id, "reason": type(e).__name__, "count": count},
            )
            return PhotoResult(job=job, count=count)
        return PhotoResult(job=result.job, count=count, status_changed=result.changed)

    async def remove_photo(self, job_id: str, kind: PhotoKind | str, index: int) -> tuple[JobRecord, str]:
        """
        Remove one photo by position.

        Returns:
            tuple: Updated job and the removed reference

        Raises:
            PhotoRemovalNotAllowed: Start photos of a completed job
            PhotoIndexOutOfRange: No photo at that position
        """
        kind = PhotoKind(kind)
        job = await self._current(job_id)
        tracker = PhotoEvidenceTracker(job.photos, job.status)
        removed = tracker.remove_at(kind, index)
        job = await self._commit(replace(job, photos=tracker.photos), f"remove_photo:{kind.value}")
        return job, removed

    async def retry_job(self, job_id: str) -> JobRecord:
        """
        Re-send a failed write, diffed against the last confirmed copy.

        A job without a failed write is returned as cached.

        Raises:
            JobNotFoundError: Job is gone remotely
            RemoteFailure: Write rejected again; the entry stays failed
        """
        entry = self.cache.get(job_id)
        if entry is None:
            return await self.load(job_id)
        if entry.state is not SyncState.FAILED:
            return entry.job

        fields = changed_fields(entry.confirmed, entry.job)
        try:
            if fields:
                await self._gateway.update(JOBS, job_id, fields)
        except NotFound as e:
            self.cache.evict(job_id)
            raise JobNotFoundError(job_id) from e
        except RemoteFailure as e:
            self.cache.fail(job_id, e.message)
            raise

        self.cache.confirm(job_id)
        log_with_context(logger, logging.INFO, "Job write retried", job_id=job_id, fields=sorted(fields))
        return entry.job

    async def retry_pending(self) -> RetryReport:
        """Re-send every failed write."""
        confirmed: list[str] = []
        failed: dict[str, str] = {}

        for entry in self.cache.unconfirmed():
            if entry.state is not SyncState.FAILED:
                continue
            job_id = entry.job.id
            try:
                await self.retry_job(job_id)
            except JobNotFoundError:
                failed[job_id] = "not_found"
                continue
            except RemoteFailure as e:
                failed[job_id] = e.message
                continue
            confirmed.append(job_id)

        log_with_context(
            logger,
            logging.INFO,
            "Retried failed job writes",
            confirmed=confirmed,
            failed=list(failed),
        )
        return RetryReport(confirmed=confirmed, failed=failed)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def begin_deletion(self, job_id: str) -> DeletionTicket:
        await self._current(job_id)
        ticket = self.deletion.begin(job_id)
        log_with_context(logger, logging.INFO, "Job deletion requested", job_id=job_id, ticket_id=ticket.id)
        return ticket

    async def confirm_deletion(self, job_id: str, ticket_id: str) -> DeletionResult:
        """
        Record one confirmation; the second one deletes the job.

        A failed remote delete discards the ticket, so a new request has
        to be confirmed twice again.

        Raises:
            NotFound: Unknown or cancelled ticket
            RemoteFailure: Delete rejected by the gateway
        """
        ticket = self.deletion.confirm(ticket_id, job_id)
        if not ticket.is_confirmed:
            return DeletionResult(ticket=ticket)
        await self.delete_job(job_id, ticket_id)
        return DeletionResult(ticket=ticket, deleted=True)

    def cancel_deletion(self, job_id: str, ticket_id: str) -> None:
        self.deletion.cancel(ticket_id, job_id)
        log_with_context(logger, logging.INFO, "Job deletion cancelled", job_id=job_id, ticket_id=ticket_id)

    async def delete_job(self, job_id: str, ticket_id: str) -> None:
        """
        Delete a job whose ticket carries both confirmations.

        Raises:
            DeletionNotConfirmed: Ticket is missing a confirmation
            JobNotFoundError: Job already gone remotely
            RemoteFailure: Delete rejected by the gateway
        """
        self.deletion.authorize(ticket_id, job_id)
        try:
            await self._gateway.delete(JOBS, job_id)
        except NotFound as e:
            self.deletion.discard(ticket_id)
            self.cache.evict(job_id)
            raise JobNotFoundError(job_id) from e
        except RemoteFailure as e:
            self.deletion.discard(ticket_id)
            log_exception_with_context(logger, "Job delete failed", e, job_id=job_id)
            raise

        self.deletion.discard(ticket_id)
        self.cache.evict(job_id)
        self._deferred_completion.discard(job_id)
        log_with_context(logger, logging.INFO, "Job deleted", job_id=job_id)

    # ------------------------------------------------------------------
    # Change feed
    # ------------------------------------------------------------------

    def attach_change_feed(self, filters: Record | None = None) -> None:
        if self._subscription is not None:
            return
        self._subscription = self._gateway.subscribe_to_changes(JOBS, filters, self.apply_change)

    def detach_change_feed(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def apply_change(self, event: ChangeEvent) -> None:
        """Merge a remote change into the cache; the remote copy wins."""
        if event.collection != JOBS or event.record_id not in self.cache:
            return
        if event.kind is ChangeKind.DELETE:
            self.cache.evict(event.record_id)
            return
        if event.record is None:
            return
        try:
            job = JobRecord.from_row(event.record)
        except (ValidationError, KeyError, ValueError) as e:
            logger.warning(
                "Ignoring malformed job change",
                extra={"job_id": event.record_id, "error": str(e)},
            )
            return
        self._refresh(job)
