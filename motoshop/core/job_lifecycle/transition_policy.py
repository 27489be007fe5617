"""
Job status transition policy.

Pure decision logic: given a job and a requested status, either return
the updated record (with its system note and derived fields) or raise
the reason the change is not allowed. No I/O happens here, so every
rule can be exercised without a gateway.

State machine:
    pending     -> in-progress  (start photos >= minimum)
    on-hold     -> in-progress  (resume; start photos >= minimum)
    pending     -> on-hold
    in-progress -> on-hold
    pending | in-progress | on-hold -> completed
                                (completion photos >= minimum, final cost set)

Every other pair is listed in REJECTED_TRANSITIONS. Requesting the
current status is a no-op.

Dependencies: motoshop.core.job_lifecycle.records, motoshop.core.exceptions
System role: Gatekeeper for every job status change
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from motoshop.core.exceptions import (
    FinalCostRequired,
    InvalidTransition,
    PhotoRequirementNotMet,
)
from motoshop.core.job_lifecycle.records import (
    JobRecord,
    JobStatus,
    Note,
    PhotoKind,
    is_numeric_cost,
)

SYSTEM_AUTHOR = "system"

NOTE_STARTED = "Job started - initial photos uploaded"
NOTE_RESUMED = "Job resumed"
NOTE_ON_HOLD = "Job put on hold"
NOTE_COMPLETED = "Job completed - final photos uploaded"


@dataclass(frozen=True)
class PhotoRules:
    """Minimum photo counts per evidence set."""

    min_start_photos: int = 3
    min_completion_photos: int = 3


@dataclass(frozen=True)
class TransitionOutcome:
    """
    Result of an allowed transition request.

    Attributes:
        job: Job after the transition (same object when unchanged)
        changed: False when the requested status was already current
        note: System note appended by the transition, if any
    """

    job: JobRecord
    changed: bool
    note: Note | None = None


_Handler = Callable[[JobRecord, PhotoRules, datetime], TransitionOutcome]


def _require_photos(job: JobRecord, kind: PhotoKind, required: int) -> None:
    actual = job.photos.count(kind)
    if actual < required:
        raise PhotoRequirementNotMet(kind.value, required, actual)


def _advance(job: JobRecord, status: JobStatus, text: str, now: datetime, **derived) -> TransitionOutcome:
    note = Note(text=text, timestamp=now, author=SYSTEM_AUTHOR)
    updated = replace(job, status=status, notes=job.notes + (note,), **derived)
    return TransitionOutcome(job=updated, changed=True, note=note)


def _start(job: JobRecord, rules: PhotoRules, now: datetime) -> TransitionOutcome:
    _require_photos(job, PhotoKind.START, rules.min_start_photos)
    return _advance(job, JobStatus.IN_PROGRESS, NOTE_STARTED, now)


def _resume(job: JobRecord, rules: PhotoRules, now: datetime) -> TransitionOutcome:
    _require_photos(job, PhotoKind.START, rules.min_start_photos)
    return _advance(job, JobStatus.IN_PROGRESS, NOTE_RESUMED, now)


def _hold(job: JobRecord, rules: PhotoRules, now: datetime) -> TransitionOutcome:
    return _advance(job, JobStatus.ON_HOLD, NOTE_ON_HOLD, now)


def _complete(job: JobRecord, rules: PhotoRules, now: datetime) -> TransitionOutcome:
    _require_photos(job, PhotoKind.COMPLETION, rules.min_completion_photos)
    if job.final_cost is None:
        raise FinalCostRequired(job.id)
    if not is_numeric_cost(job.final_cost):
        raise FinalCostRequired(job.id, reason="not_numeric")
    return _advance(job, JobStatus.COMPLETED, NOTE_COMPLETED, now, date_completed=now)


ALLOWED_TRANSITIONS: dict[tuple[JobStatus, JobStatus], _Handler] = {
    (JobStatus.PENDING, JobStatus.IN_PROGRESS): _start,
    (JobStatus.ON_HOLD, JobStatus.IN_PROGRESS): _resume,
    (JobStatus.PENDING, JobStatus.ON_HOLD): _hold,
    (JobStatus.IN_PROGRESS, JobStatus.ON_HOLD): _hold,
    (JobStatus.PENDING, JobStatus.COMPLETED): _complete,
    (JobStatus.IN_PROGRESS, JobStatus.COMPLETED): _complete,
    (JobStatus.ON_HOLD, JobStatus.COMPLETED): _complete,
}

REJECTED_TRANSITIONS: frozenset[tuple[JobStatus, JobStatus]] = frozenset({
    (JobStatus.IN_PROGRESS, JobStatus.PENDING),
    (JobStatus.ON_HOLD, JobStatus.PENDING),
    (JobStatus.COMPLETED, JobStatus.PENDING),
    (JobStatus.COMPLETED, JobStatus.IN_PROGRESS),
    (JobStatus.COMPLETED, JobStatus.ON_HOLD),
})


def evaluate_transition(
    job: JobRecord,
    requested: JobStatus,
    *,
    now: datetime,
    rules: PhotoRules = PhotoRules(),
) -> TransitionOutcome:
    """
    Decide whether job may move to the requested status.

    Args:
        job: Current job record
        requested: Target status
        now: Transition time (used for the note and date_completed)
        rules: Photo minimums

    Returns:
        TransitionOutcome: Updated job, or the same job with changed=False
            when requested is already the current status

    Raises:
        PhotoRequirementNotMet: Evidence set below the minimum
        FinalCostRequired: Completing without a numeric final cost
        InvalidTransition: Pair is not part of the state machine
    """
    requested = JobStatus(requested)
    if requested is job.status:
        return TransitionOutcome(job=job, changed=False)

    pair = (job.status, requested)
    if pair in REJECTED_TRANSITIONS:
        raise InvalidTransition(job.status.value, requested.value)
    return ALLOWED_TRANSITIONS[pair](job, rules, now)


def allowed_targets(job: JobRecord) -> list[JobStatus]:
    """List the statuses reachable from the job's current status."""
    return [to for (frm, to) in ALLOWED_TRANSITIONS if frm is job.status]
