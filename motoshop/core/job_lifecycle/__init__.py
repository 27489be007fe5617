"""
Job lifecycle core.

Exports:
  - JobRecord, Note, PhotoSet, Customer, Motorcycle: Job record model
  - JobStatus, ServiceType, PhotoKind: Closed enumerations
  - evaluate_transition, PhotoRules, TransitionOutcome: Transition policy
  - PhotoEvidenceTracker: Photo evidence sequences
  - DeletionGate, DeletionTicket: Two-step delete confirmation
  - search_jobs, SearchScope: Free-text job lookup
  - QuickNoteCategory: Canned note categories

Dependencies: motoshop.core.exceptions
System role: Pure domain rules for how a service job moves through the shop
"""

from motoshop.core.job_lifecycle.deletion import (
    REQUIRED_CONFIRMATIONS,
    DeletionGate,
    DeletionStage,
    DeletionTicket,
)
from motoshop.core.job_lifecycle.photo_tracker import PhotoEvidenceTracker
from motoshop.core.job_lifecycle.records import (
    Customer,
    JobRecord,
    JobStatus,
    Motorcycle,
    Note,
    PhotoKind,
    PhotoSet,
    ServiceType,
    changed_fields,
    parse_cost,
    utc_now,
)
from motoshop.core.job_lifecycle.quick_notes import QuickNoteCategory, parse_category
from motoshop.core.job_lifecycle.search import SearchScope, search_jobs
from motoshop.core.job_lifecycle.transition_policy import (
    SYSTEM_AUTHOR,
    PhotoRules,
    TransitionOutcome,
    allowed_targets,
    evaluate_transition,
)

__all__ = [
    "REQUIRED_CONFIRMATIONS",
    "SYSTEM_AUTHOR",
    "Customer",
    "DeletionGate",
    "DeletionStage",
    "DeletionTicket",
    "JobRecord",
    "JobStatus",
    "Motorcycle",
    "Note",
    "PhotoEvidenceTracker",
    "PhotoKind",
    "PhotoRules",
    "PhotoSet",
    "QuickNoteCategory",
    "SearchScope",
    "ServiceType",
    "TransitionOutcome",
    "allowed_targets",
    "changed_fields",
    "evaluate_transition",
    "parse_category",
    "parse_cost",
    "search_jobs",
    "utc_now",
]
