"""
Job record model.

Canonical, immutable shape of a service job and its tagged sub-records.
Every mutation returns a new record, so the previous copy can be kept as
the last confirmed state while a write is in flight.

Dependencies: dataclasses, decimal
System role: Domain model shared by the transition policy, photo tracker
and persistence synchronizer
"""

import enum
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from motoshop.core.exceptions import ValidationError


class JobStatus(str, enum.Enum):
    """
    Job lifecycle states.

    PENDING: Job taken in, no work started
    IN_PROGRESS: Start photos uploaded, mechanic working
    ON_HOLD: Work paused (parts, customer approval)
    COMPLETED: Completion photos and final cost recorded
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class ServiceType(str, enum.Enum):
    """Service categories offered at intake."""

    OIL_CHANGE = "Oil Change"
    BRAKE_SERVICE = "Brake Service"
    ENGINE_REPAIR = "Engine Repair"
    TRANSMISSION_SERVICE = "Transmission Service"
    ELECTRICAL_REPAIR = "Electrical Repair"
    BODY_WORK = "Body Work"
    PAINT_JOB = "Paint Job"
    TIRE_REPLACEMENT = "Tire Replacement"
    BATTERY_REPLACEMENT = "Battery Replacement"
    GENERAL_MAINTENANCE = "General Maintenance"
    INSPECTION = "Inspection"
    CUSTOM_WORK = "Custom Work"
    OTHER = "Other"


class PhotoKind(str, enum.Enum):
    """Photo evidence sets kept per job."""

    START = "start"
    COMPLETION = "completion"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_cost(value: str | None, field_name: str) -> str | None:
    """
    Normalize a decimal-as-string cost.

    Args:
        value: Raw cost text, or None to clear it
        field_name: Field name for error reporting

    Returns:
        str | None: Cost formatted with two decimals, or None

    Raises:
        ValidationError: If the value is not a non-negative number
    """
    if value is None:
        return None
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field_name} must be a non-negative amount", field=field_name)
    return str(amount.quantize(Decimal("0.01")))


def is_numeric_cost(value: str | None) -> bool:
    """Return True when value is a parseable finite amount."""
    if value is None or not str(value).strip():
        return False
    try:
        return Decimal(str(value).strip().replace(",", "")).is_finite()
    except InvalidOperation:
        return False


@dataclass(frozen=True)
class Note:
    """A single entry in a job's append-only notes log."""

    text: str
    timestamp: datetime
    author: str

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValidationError("Note cannot be empty", field="text")

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
            "author": self.author,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return cls(
            text=data["text"],
            timestamp=timestamp or utc_now(),
            author=data.get("author") or "unknown",
        )


@dataclass(frozen=True)
class PhotoSet:
    """
    Start and completion photo references for one job.

    References are opaque (storage URLs or encoded images). Order is the
    upload order and is preserved across add and remove.
    """

    start: tuple[str, ...] = ()
    completion: tuple[str, ...] = ()

    def of(self, kind: PhotoKind) -> tuple[str, ...]:
        return self.start if kind is PhotoKind.START else self.completion

    def count(self, kind: PhotoKind) -> int:
        return len(self.of(kind))

    def with_added(self, kind: PhotoKind, reference: str) -> "PhotoSet":
        if not reference:
            raise ValidationError("Photo reference cannot be empty", field="reference")
        return replace(self, **{kind.value: self.of(kind) + (reference,)})

    def without(self, kind: PhotoKind, index: int) -> "PhotoSet":
        photos = self.of(kind)
        return replace(self, **{kind.value: photos[:index] + photos[index + 1:]})

    def to_dict(self) -> dict[str, list[str]]:
        return {"start": list(self.start), "completion": list(self.completion)}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PhotoSet":
        data = data or {}
        return cls(
            start=tuple(data.get("start") or ()),
            completion=tuple(data.get("completion") or ()),
        )


@dataclass(frozen=True)
class Customer:
    """Customer contact details; email is required."""

    email: str
    name: str | None = None
    phone: str | None = None
    tracking_id: str | None = None

    def __post_init__(self) -> None:
        if not self.email or "@" not in self.email:
            raise ValidationError("Customer email is required", field="customer.email")


@dataclass(frozen=True)
class Motorcycle:
    """Vehicle description captured at intake."""

    make: str | None = None
    model: str | None = None
    year: int | None = None
    vin: str | None = None
    plate: str | None = None
    color: str | None = None
    engine_number: str | None = None


def _dataclass_from_dict(cls, data: dict[str, Any] | None):
    names = {f.name for f in fields(cls)}
    return cls(**{key: value for key, value in (data or {}).items() if key in names})


def _dataclass_to_dict(obj) -> dict[str, Any]:
    return {f.name: getattr(obj, f.name) for f in fields(obj)}


@dataclass(frozen=True)
class JobRecord:
    """
    A service job tracked through the shop.

    Invariants enforced on construction:
        - date_completed is set if and only if status is COMPLETED
        - costs, when present, are numeric strings

    Attributes:
        id: Opaque job id (JOB-...), immutable
        customer: Customer contact record
        motorcycle: Vehicle record
        service_type: Service category
        status: Lifecycle state
        date_created: Creation time, immutable
        shop_id: Owning shop, None when unassigned
        created_by: Identity id of the creating caller
        date_completed: Completion time, only for completed jobs
        notes: Append-only notes log
        photos: Start and completion photo evidence
        initial_cost: Estimate captured at intake
        final_cost: Amount charged; required before completion
        description: Free-text problem description from intake
    """

    id: str
    customer: Customer
    motorcycle: Motorcycle
    service_type: ServiceType
    status: JobStatus
    date_created: datetime
    shop_id: str | None = None
    created_by: str | None = None
    date_completed: datetime | None = None
    notes: tuple[Note, ...] = ()
    photos: PhotoSet = field(default_factory=PhotoSet)
    initial_cost: str | None = None
    final_cost: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        completed = self.status is JobStatus.COMPLETED
        if completed != (self.date_completed is not None):
            raise ValidationError(
                "date_completed must be set exactly when the job is completed",
                field="date_completed",
                details={"job_id": self.id, "status": self.status.value},
            )
        for name in ("initial_cost", "final_cost"):
            value = getattr(self, name)
            if value is not None and not is_numeric_cost(value):
                raise ValidationError(f"{name} must be a number", field=name)

    def with_note(self, note: Note) -> "JobRecord":
        return replace(self, notes=self.notes + (note,))

    def to_row(self) -> dict[str, Any]:
        """Flatten the record into a gateway row for the jobs collection."""
        return {
            "id": self.id,
            "shop_id": self.shop_id,
            "created_by": self.created_by,
            "customer": _dataclass_to_dict(self.customer),
            "tracking_id": self.customer.tracking_id,
            "motorcycle": _dataclass_to_dict(self.motorcycle),
            "service_type": self.service_type,
            "status": self.status,
            "date_created": self.date_created,
            "date_completed": self.date_completed,
            "notes": [note.to_dict() for note in self.notes],
            "photos": self.photos.to_dict(),
            "initial_cost": self.initial_cost,
            "final_cost": self.final_cost,
            "description": self.description,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "JobRecord":
        """Build a record from a jobs collection row."""
        return cls(
            id=row["id"],
            shop_id=row.get("shop_id"),
            created_by=row.get("created_by"),
            customer=_dataclass_from_dict(Customer, row.get("customer")),
            motorcycle=_dataclass_from_dict(Motorcycle, row.get("motorcycle")),
            service_type=ServiceType(row["service_type"]),
            status=JobStatus(row["status"]),
            date_created=_as_aware(row["date_created"]),
            date_completed=_as_aware(row.get("date_completed")),
            notes=tuple(Note.from_dict(n) for n in row.get("notes") or ()),
            photos=PhotoSet.from_dict(row.get("photos")),
            initial_cost=row.get("initial_cost"),
            final_cost=row.get("final_cost"),
            description=row.get("description"),
        )


def _as_aware(value: datetime | str | None) -> datetime | None:
    # SQLite drops tzinfo; every stored time is UTC
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def changed_fields(before: JobRecord, after: JobRecord) -> dict[str, Any]:
    """
    Compute the field-level update between two copies of a job.

    Returns:
        dict: Row fields whose values differ, keyed by column name
    """
    old_row = before.to_row()
    return {
        key: value for key, value in after.to_row().items()
        if key != "id" and old_row.get(key) != value
    }
