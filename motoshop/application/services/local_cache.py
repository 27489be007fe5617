"""
Local job cache.

Holds the working copy of each job the process has touched, plus the
last copy the remote store confirmed. Entries move between pending,
confirmed and failed as optimistic writes go out and come back. Remote
refreshes replace confirmed entries and are rebased under unconfirmed
ones.

Dependencies: motoshop.core.job_lifecycle
System role: Local-first state for the persistence synchronizer
"""

import enum
from dataclasses import dataclass, replace

from motoshop.core.job_lifecycle.records import JobRecord, changed_fields


class SyncState(str, enum.Enum):
    """Write state of a cached job."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class CacheEntry:
    """
    One cached job.

    Attributes:
        job: Working copy, including unconfirmed local changes
        confirmed: Last copy acknowledged by the remote store
        state: Write state of the working copy
        error: Message of the last failed write
    """

    job: JobRecord
    confirmed: JobRecord
    state: SyncState = SyncState.CONFIRMED
    error: str | None = None


class LocalJobCache:
    """In-memory job cache keyed by job id."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, job_id: str) -> CacheEntry | None:
        return self._entries.get(job_id)

    def peek(self, job_id: str) -> JobRecord | None:
        entry = self._entries.get(job_id)
        return entry.job if entry else None

    def put_confirmed(self, job: JobRecord) -> CacheEntry:
        """Store job as the remote truth, discarding any local changes."""
        entry = CacheEntry(job=job, confirmed=job)
        self._entries[job.id] = entry
        return entry

    def refresh(self, remote: JobRecord) -> CacheEntry:
        """
        Take a fresh remote copy as the confirmed state of a job.

        A confirmed entry is replaced outright. An entry with unconfirmed
        changes keeps them: the changed fields are re-applied on top of the
        remote copy and the entry keeps its state.

        Raises:
            ValidationError: Local changes no longer fit the remote copy
        """
        entry = self._entries.get(remote.id)
        if entry is None or entry.state is SyncState.CONFIRMED:
            return self.put_confirmed(remote)

        local_changes = changed_fields(entry.confirmed, entry.job)
        working = JobRecord.from_row({**remote.to_row(), **local_changes})
        if not changed_fields(remote, working):
            return self.put_confirmed(remote)

        entry = replace(entry, job=working, confirmed=remote)
        self._entries[remote.id] = entry
        return entry

    def stage(self, job: JobRecord) -> CacheEntry:
        """
        Record an optimistic change awaiting remote confirmation.

        Raises:
            KeyError: Job was never loaded into the cache
        """
        current = self._entries[job.id]
        entry = CacheEntry(job=job, confirmed=current.confirmed, state=SyncState.PENDING)
        self._entries[job.id] = entry
        return entry

    def confirm(self, job_id: str) -> CacheEntry | None:
        entry = self._entries.get(job_id)
        if entry is None:
            return None
        entry = CacheEntry(job=entry.job, confirmed=entry.job)
        self._entries[job_id] = entry
        return entry

    def fail(self, job_id: str, error: str) -> CacheEntry | None:
        """Keep the working copy but flag it as not persisted."""
        entry = self._entries.get(job_id)
        if entry is None:
            return None
        entry = replace(entry, state=SyncState.FAILED, error=error)
        self._entries[job_id] = entry
        return entry

    def rollback(self, job_id: str) -> JobRecord | None:
        """Restore the last confirmed copy and return it."""
        entry = self._entries.get(job_id)
        if entry is None:
            return None
        self._entries[job_id] = CacheEntry(job=entry.confirmed, confirmed=entry.confirmed)
        return entry.confirmed

    def evict(self, job_id: str) -> None:
        self._entries.pop(job_id, None)

    def unconfirmed(self) -> list[CacheEntry]:
        """Entries whose working copy has not been persisted."""
        return [e for e in self._entries.values() if e.state is not SyncState.CONFIRMED]

    def clear(self) -> None:
        self._entries.clear()
