"""
Job domain schemas.

Request/response schemas for job intake, progress and tracking.

Dependencies: pydantic
System role: Job API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field

from motoshop.core.job_lifecycle.records import JobStatus, PhotoKind, ServiceType


class CustomerSchema(BaseModel):
    """Customer contact details."""

    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=64)
    tracking_id: str | None = None


class MotorcycleSchema(BaseModel):
    """Vehicle captured at intake."""

    make: str | None = Field(None, max_length=128)
    model: str | None = Field(None, max_length=128)
    year: int | None = Field(None, ge=1885, le=2100)
    vin: str | None = Field(None, max_length=64)
    plate: str | None = Field(None, max_length=32)
    color: str | None = Field(None, max_length=64)
    engine_number: str | None = Field(None, max_length=64)


class CreateJobRequest(BaseModel):
    """Request schema for job intake."""

    customer: CustomerSchema
    motorcycle: MotorcycleSchema = Field(default_factory=MotorcycleSchema)
    service_type: ServiceType
    description: str | None = Field(None, max_length=4096)
    estimated_cost: str | None = Field(None, description="Estimate; stored as initial cost")
    shop_id: str | None = Field(None, description="Owning shop (admins/support only)")


class AddNoteRequest(BaseModel):
    """
    Request schema for appending a note.

    Either free text or the id of a quick note whose text is appended.
    """

    text: str | None = Field(None, max_length=4096)
    quick_note_id: str | None = Field(None, max_length=64)


class UpdateCostsRequest(BaseModel):
    """Request schema for cost edits. Omitted fields stay unchanged."""

    initial_cost: str | None = None
    final_cost: str | None = None


class StatusChangeRequest(BaseModel):
    """Request schema for a status transition."""

    status: JobStatus


class NoteResponse(BaseModel):
    text: str
    timestamp: datetime
    author: str


class PhotosResponse(BaseModel):
    start: list[str]
    completion: list[str]


class JobResponse(BaseModel):
    """Full job view for shop staff."""

    id: str
    shop_id: str | None
    created_by: str | None
    customer: CustomerSchema
    motorcycle: MotorcycleSchema
    service_type: ServiceType
    status: JobStatus
    date_created: datetime
    date_completed: datetime | None
    notes: list[NoteResponse]
    photos: PhotosResponse
    initial_cost: str | None
    final_cost: str | None
    description: str | None
    allowed_statuses: list[JobStatus] = Field(default_factory=list)
    sync_state: str | None = None


class JobListResponse(BaseModel):
    """Visible jobs split into active and completed."""

    active: list[JobResponse]
    completed: list[JobResponse]


class JobSearchResponse(BaseModel):
    """Jobs matching a search query."""

    query: str
    scope: str
    jobs: list[JobResponse]
    total: int


class TransitionResponse(BaseModel):
    """Result of a status change request."""

    job: JobResponse
    changed: bool


class PhotoUploadResponse(BaseModel):
    """Result of a photo upload."""

    job: JobResponse
    kind: PhotoKind
    count: int
    url: str
    status_changed: bool


class CostUpdateResponse(BaseModel):
    """Result of a cost edit."""

    job: JobResponse
    status_changed: bool
    deferred_error: str | None = None


class DeletionTicketResponse(BaseModel):
    """State of a deletion confirmation ticket."""

    ticket_id: str
    job_id: str
    confirmations: int
    stage: str
    deleted: bool = False


class TrackingResponse(BaseModel):
    """Public job view shown to customers."""

    id: str
    status: JobStatus
    service_type: ServiceType
    motorcycle: MotorcycleSchema
    customer_name: str | None
    date_created: datetime
    date_completed: datetime | None
    notes: list[NoteResponse]
    photos: PhotosResponse
    final_cost: str | None
