"""
Job ORM model.

Stores a service job as one row. Customer, motorcycle, notes and photos
are JSON documents shaped by motoshop.core.job_lifecycle.records.

Dependencies: sqlalchemy, motoshop.boundary.db.base
System role: Persistent job storage behind the jobs collection
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from motoshop.boundary.db.base import Base, TimestampMixin
from motoshop.core.job_lifecycle.records import JobStatus, ServiceType


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class JobModel(Base, TimestampMixin):
    """
    Job ORM model.

    Attributes:
        id: Human-friendly job id (JOB-...), primary key
        shop_id: Owning shop, NULL when unassigned
        created_by: Identity id of the creating user
        tracking_id: Customer tracking code (copied out of customer for lookup)
        customer: JSON {name, email, phone, tracking_id}
        motorcycle: JSON {make, model, year, vin, plate, color, engine_number}
        service_type: Service category enum (stored by value)
        status: Lifecycle status enum (stored by value)
        date_created: Intake time (immutable)
        date_completed: Completion time, NULL unless status is completed
        notes: JSON list of {text, timestamp, author}, append-only
        photos: JSON {start: [...], completion: [...]}
        initial_cost: Estimate as decimal string
        final_cost: Charged amount as decimal string
        description: Problem description from intake
    """

    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)

    shop_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("shops.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    tracking_id: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)

    customer: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    motorcycle: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    service_type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType, native_enum=False, values_callable=_enum_values, length=32),
        nullable=False,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
        default=JobStatus.PENDING,
        index=True,
    )

    date_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    date_completed: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    notes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    photos: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: {"start": [], "completion": []},
    )

    initial_cost: Mapped[str | None] = mapped_column(String(32), nullable=True)

    final_cost: Mapped[str | None] = mapped_column(String(32), nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
