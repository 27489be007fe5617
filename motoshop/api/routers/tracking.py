"""
Public job tracking endpoint.

Routes: GET /track/{job_id}

No caller identity is required; customers reach this page from the
QR code or link handed out at intake.

Dependencies: motoshop.application.services, motoshop.models
System role: Customer-facing job status HTTP API
"""

from fastapi import APIRouter, Depends

from motoshop.api.deps.dependencies import get_job_service
from motoshop.api.routers.jobs.job_responses import map_job_to_tracking
from motoshop.api.routers.router_utils.error_handling import handle_domain_errors
from motoshop.application.services import JobService
from motoshop.models.job import TrackingResponse

router = APIRouter(prefix="/track", tags=["tracking"])


@router.get("/{job_id}", response_model=TrackingResponse)
@handle_domain_errors
async def track_job(
    job_id: str,
    job_service: JobService = Depends(get_job_service),
) -> TrackingResponse:
    """
    Look up a job by id (case-insensitive) or customer tracking code.

    Raises:
        HTTPException(404): No matching job
    """
    job = await job_service.track_job(job_id)
    return map_job_to_tracking(job)
