"""
Job search.

Case-insensitive substring matching over the fields the front desk looks
jobs up by: customer contact details, the motorcycle's identity, or the
job id itself.

Dependencies: none
System role: Pure matching rules behind the job search endpoint
"""

import enum
from typing import Iterable

from motoshop.core.exceptions import ValidationError
from motoshop.core.job_lifecycle.records import JobRecord


class SearchScope(str, enum.Enum):
    """Which part of a job a search query is matched against."""

    CUSTOMER = "customer"
    MOTORCYCLE = "motorcycle"
    JOB = "job"
    ALL = "all"


def _customer_fields(job: JobRecord) -> tuple[str | None, ...]:
    return (job.customer.name, job.customer.email, job.customer.phone)


def _motorcycle_fields(job: JobRecord) -> tuple[str | None, ...]:
    bike = job.motorcycle
    return (bike.make, bike.model, bike.vin, bike.plate)


def _job_fields(job: JobRecord) -> tuple[str | None, ...]:
    return (job.id,)


_SCOPE_FIELDS = {
    SearchScope.CUSTOMER: (_customer_fields,),
    SearchScope.MOTORCYCLE: (_motorcycle_fields,),
    SearchScope.JOB: (_job_fields,),
    SearchScope.ALL: (_customer_fields, _motorcycle_fields, _job_fields),
}


def normalize_query(query: str | None) -> str:
    """
    Prepare a raw query for matching.

    Raises:
        ValidationError: If the query is empty after trimming
    """
    needle = (query or "").strip().lower()
    if not needle:
        raise ValidationError("Search query cannot be empty", field="q")
    return needle


def matches(job: JobRecord, needle: str, scope: SearchScope = SearchScope.ALL) -> bool:
    """Return True when any field in scope contains the normalized needle."""
    for extract in _SCOPE_FIELDS[scope]:
        for value in extract(job):
            if value and needle in value.lower():
                return True
    return False


def search_jobs(
    jobs: Iterable[JobRecord],
    query: str | None,
    scope: SearchScope = SearchScope.ALL,
) -> list[JobRecord]:
    """
    Filter jobs by a free-text query.

    Args:
        jobs: Candidate jobs, already limited to what the caller may see
        query: Raw query text
        scope: Which fields to match

    Returns:
        list[JobRecord]: Matching jobs in input order
    """
    needle = normalize_query(query)
    return [job for job in jobs if matches(job, needle, scope)]
