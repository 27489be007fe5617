"""
Job API endpoints.

Routes:
- POST /jobs - Job intake
- GET /jobs - List visible jobs (active and completed)
- GET /jobs/search - Search visible jobs
- GET /jobs/{id} - Get single job
- POST /jobs/{id}/notes - Append note (free text or quick note)
- PUT /jobs/{id}/costs - Edit estimate/final cost
- POST /jobs/{id}/status - Request status transition
- POST /jobs/{id}/sync - Retry a failed write
- POST /jobs/{id}/photos/{kind} - Upload start/completion photo
- DELETE /jobs/{id}/photos/{kind}/{index} - Remove photo
- POST /jobs/{id}/deletion - Begin deletion
- POST /jobs/{id}/deletion/{ticket_id}/confirm - Confirm deletion step
- DELETE /jobs/{id}/deletion/{ticket_id} - Cancel deletion

Dependencies: motoshop.application.services, motoshop.models
System role: Job management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile

from motoshop.api.deps.dependencies import (
    get_current_caller,
    get_job_service,
    get_quick_note_service,
)
from motoshop.api.routers.router_utils.error_handling import handle_domain_errors
from motoshop.application.services import JobService, QuickNoteService
from motoshop.core.access import Caller
from motoshop.core.job_lifecycle import PhotoKind, SearchScope
from motoshop.models.job import (
    AddNoteRequest,
    CostUpdateResponse,
    CreateJobRequest,
    DeletionTicketResponse,
    JobListResponse,
    JobResponse,
    JobSearchResponse,
    PhotoUploadResponse,
    StatusChangeRequest,
    TransitionResponse,
    UpdateCostsRequest,
)

from .job_responses import map_job_to_response, map_jobs_to_response, map_ticket_to_response
from .job_validators import (
    validate_cost_update,
    validate_job_creation,
    validate_note,
    validate_photo_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_response(job_service: JobService, job) -> JobResponse:
    return map_job_to_response(job, job_service.synchronizer.sync_state(job.id))


@router.post("", response_model=JobResponse, status_code=201)
@handle_domain_errors
async def create_job(
    request: CreateJobRequest,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Take in a new job.

    Raises:
        HTTPException(400): Invalid intake data
        HTTPException(403): Caller may not create jobs for the shop
        HTTPException(502): Gateway write failed
    """
    validate_job_creation(request)

    job = await job_service.create_job(
        caller,
        customer=request.customer.model_dump(),
        motorcycle=request.motorcycle.model_dump(),
        service_type=request.service_type.value,
        description=request.description,
        estimated_cost=request.estimated_cost,
        shop_id=request.shop_id,
    )
    return _job_response(job_service, job)


@router.get("", response_model=JobListResponse)
@handle_domain_errors
async def list_jobs(
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> JobListResponse:
    """
    List jobs visible to the caller.

    Raises:
        HTTPException(403): Caller has no approved shop membership
    """
    listing = await job_service.list_jobs(caller)
    logger.info(
        "Jobs listed",
        extra={"user_id": caller.id, "active": len(listing.active), "completed": len(listing.completed)},
    )
    return JobListResponse(
        active=map_jobs_to_response(listing.active),
        completed=map_jobs_to_response(listing.completed),
    )


@router.get("/search", response_model=JobSearchResponse)
@handle_domain_errors
async def search_jobs(
    q: str = Query(..., max_length=255, description="Text to look for"),
    scope: SearchScope = Query(SearchScope.ALL, description="Fields to match"),
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> JobSearchResponse:
    """
    Search visible jobs by customer, motorcycle or job id.

    Raises:
        HTTPException(400): Empty query
        HTTPException(403): Caller has no approved shop membership
    """
    jobs = await job_service.search_jobs(caller, q, scope.value)
    return JobSearchResponse(
        query=q,
        scope=scope.value,
        jobs=map_jobs_to_response(jobs),
        total=len(jobs),
    )


@router.get("/{job_id}", response_model=JobResponse)
@handle_domain_errors
async def get_job(
    job_id: str,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Get a single job.

    Raises:
        HTTPException(404): Job not found
        HTTPException(403): Job belongs to another shop
    """
    job = await job_service.get_job(caller, job_id)
    return _job_response(job_service, job)


@router.post("/{job_id}/notes", response_model=JobResponse, status_code=201)
@handle_domain_errors
async def add_note(
    job_id: str,
    request: AddNoteRequest,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
    quick_note_service: QuickNoteService = Depends(get_quick_note_service),
) -> JobResponse:
    """
    Append a note, typed or picked from the quick notes.

    Raises:
        HTTPException(400): Neither or both of text and quick_note_id
        HTTPException(404): Unknown job or quick note
    """
    validate_note(request)
    text = request.text
    if request.quick_note_id is not None:
        text = await quick_note_service.resolve_text(caller, request.quick_note_id)
    job = await job_service.add_note(caller, job_id, text)
    return _job_response(job_service, job)


@router.put("/{job_id}/costs", response_model=CostUpdateResponse)
@handle_domain_errors
async def update_costs(
    job_id: str,
    request: UpdateCostsRequest,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> CostUpdateResponse:
    """
    Edit the estimate and/or final cost.

    Setting the final cost completes the job when a completion was
    previously refused for the missing cost.

    Raises:
        HTTPException(400): Cost is not a number
    """
    validate_cost_update(request)
    result = await job_service.set_costs(
        caller,
        job_id,
        initial_cost=request.initial_cost,
        final_cost=request.final_cost,
    )
    return CostUpdateResponse(
        job=_job_response(job_service, result.job),
        status_changed=result.status_changed,
        deferred_error=result.deferred_error.message if result.deferred_error else None,
    )


@router.post("/{job_id}/status", response_model=TransitionResponse)
@handle_domain_errors
async def change_status(
    job_id: str,
    request: StatusChangeRequest,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> TransitionResponse:
    """
    Request a status transition.

    Raises:
        HTTPException(409): Missing photos, missing final cost
            (action=final_cost_required) or disallowed transition
        HTTPException(400): Another transition for the job is in flight
    """
    result = await job_service.request_transition(caller, job_id, request.status.value)
    return TransitionResponse(job=_job_response(job_service, result.job), changed=result.changed)


@router.post("/{job_id}/sync", response_model=JobResponse)
@handle_domain_errors
async def retry_sync(
    job_id: str,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Re-send a job change the database did not accept.

    sync_state in the response reports whether the change is now stored.

    Raises:
        HTTPException(502): Database still unavailable
    """
    job = await job_service.retry_sync(caller, job_id)
    return _job_response(job_service, job)


@router.post("/{job_id}/photos/{kind}", response_model=PhotoUploadResponse, status_code=201)
@handle_domain_errors
async def upload_photo(
    job_id: str,
    kind: PhotoKind,
    file: UploadFile = File(...),
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> PhotoUploadResponse:
    """
    Upload a start or completion photo.

    A start photo that brings a pending job to the minimum moves it to
    in-progress; status_changed reports that.

    Raises:
        HTTPException(400): Empty, oversized or non-image file
        HTTPException(502): Storage or gateway failure
    """
    content = await file.read()
    validate_photo_upload(content)

    result = await job_service.upload_photo(
        caller,
        job_id,
        kind.value,
        content,
        file.content_type,
        filename=file.filename,
    )
    return PhotoUploadResponse(
        job=_job_response(job_service, result.job),
        kind=kind,
        count=result.count,
        url=result.job.photos.of(kind)[-1],
        status_changed=result.status_changed,
    )


@router.delete("/{job_id}/photos/{kind}/{index}", response_model=JobResponse)
@handle_domain_errors
async def remove_photo(
    job_id: str,
    kind: PhotoKind,
    index: int,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> JobResponse:
    """
    Remove a photo by position.

    Raises:
        HTTPException(400): No photo at that position
        HTTPException(409): Start photos of a completed job
    """
    job = await job_service.remove_photo(caller, job_id, kind.value, index)
    return _job_response(job_service, job)


@router.post("/{job_id}/deletion", response_model=DeletionTicketResponse, status_code=201)
@handle_domain_errors
async def begin_deletion(
    job_id: str,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> DeletionTicketResponse:
    """Open a deletion ticket; it must be confirmed twice."""
    ticket = await job_service.begin_deletion(caller, job_id)
    return map_ticket_to_response(ticket)


@router.post("/{job_id}/deletion/{ticket_id}/confirm", response_model=DeletionTicketResponse)
@handle_domain_errors
async def confirm_deletion(
    job_id: str,
    ticket_id: str,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> DeletionTicketResponse:
    """
    Confirm one deletion step; the second confirmation deletes the job.

    Raises:
        HTTPException(404): Unknown or cancelled ticket
        HTTPException(502): Delete failed; the job is intact
    """
    result = await job_service.confirm_deletion(caller, job_id, ticket_id)
    if result.deleted:
        logger.info("Job deleted via API", extra={"job_id": job_id, "user_id": caller.id})
    return map_ticket_to_response(result)


@router.delete("/{job_id}/deletion/{ticket_id}", status_code=204)
@handle_domain_errors
async def cancel_deletion(
    job_id: str,
    ticket_id: str,
    caller: Caller = Depends(get_current_caller),
    job_service: JobService = Depends(get_job_service),
) -> Response:
    """Cancel a deletion ticket; the job is left untouched."""
    await job_service.cancel_deletion(caller, job_id, ticket_id)
    return Response(status_code=204)
