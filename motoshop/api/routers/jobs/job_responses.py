"""
Job response mapping utilities.

Transforms job records and service results into Pydantic response models.
Centralizes response construction logic.

Dependencies: motoshop.models.job, motoshop.core.job_lifecycle
System role: Job response transformation
"""

from motoshop.application.services import DeletionResult, SyncState
from motoshop.core.job_lifecycle import DeletionTicket, JobRecord, allowed_targets
from motoshop.models.job import (
    CustomerSchema,
    DeletionTicketResponse,
    JobResponse,
    MotorcycleSchema,
    NoteResponse,
    PhotosResponse,
    TrackingResponse,
)


def _notes(job: JobRecord) -> list[NoteResponse]:
    return [NoteResponse(text=n.text, timestamp=n.timestamp, author=n.author) for n in job.notes]


def _photos(job: JobRecord) -> PhotosResponse:
    return PhotosResponse(start=list(job.photos.start), completion=list(job.photos.completion))


def map_job_to_response(job: JobRecord, sync_state: SyncState | None = None) -> JobResponse:
    """
    Transform a job record into JobResponse.

    Args:
        job: Job record
        sync_state: Local write state of the job, if cached

    Returns:
        JobResponse: Pydantic model for API response
    """
    return JobResponse(
        id=job.id,
        shop_id=job.shop_id,
        created_by=job.created_by,
        customer=CustomerSchema(
            email=job.customer.email,
            name=job.customer.name,
            phone=job.customer.phone,
            tracking_id=job.customer.tracking_id,
        ),
        motorcycle=MotorcycleSchema(**vars(job.motorcycle)),
        service_type=job.service_type,
        status=job.status,
        date_created=job.date_created,
        date_completed=job.date_completed,
        notes=_notes(job),
        photos=_photos(job),
        initial_cost=job.initial_cost,
        final_cost=job.final_cost,
        description=job.description,
        allowed_statuses=allowed_targets(job),
        sync_state=sync_state.value if sync_state else None,
    )


def map_jobs_to_response(jobs: list[JobRecord]) -> list[JobResponse]:
    return [map_job_to_response(job) for job in jobs]


def map_ticket_to_response(ticket: DeletionTicket | DeletionResult) -> DeletionTicketResponse:
    """Transform a deletion ticket (or confirmation result) into DeletionTicketResponse."""
    deleted = False
    if isinstance(ticket, DeletionResult):
        deleted = ticket.deleted
        ticket = ticket.ticket
    return DeletionTicketResponse(
        ticket_id=ticket.id,
        job_id=ticket.job_id,
        confirmations=ticket.confirmations,
        stage="deleted" if deleted else ticket.stage.value,
        deleted=deleted,
    )


def map_job_to_tracking(job: JobRecord) -> TrackingResponse:
    """
    Transform a job record into the public tracking view.

    Customer contact details other than the name are left out.
    """
    return TrackingResponse(
        id=job.id,
        status=job.status,
        service_type=job.service_type,
        motorcycle=MotorcycleSchema(**vars(job.motorcycle)),
        customer_name=job.customer.name,
        date_created=job.date_created,
        date_completed=job.date_completed,
        notes=_notes(job),
        photos=_photos(job),
        final_cost=job.final_cost,
    )
