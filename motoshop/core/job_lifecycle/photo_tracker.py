"""
Photo evidence tracker.

Keeps the start and completion photo sequences for a single job and
reports the counts the transition policy depends on. The tracker only
guards sequence integrity; it never changes the job status itself.

Dependencies: motoshop.core.job_lifecycle.records
System role: Photo add/remove rules for job evidence
"""

from motoshop.core.exceptions import PhotoIndexOutOfRange, PhotoRemovalNotAllowed
from motoshop.core.job_lifecycle.records import JobStatus, PhotoKind, PhotoSet


class PhotoEvidenceTracker:
    """
    Ordered start/completion photo sequences for one job.

    Attributes:
        photos: Current immutable PhotoSet snapshot
        status: Job status the tracker was opened with
    """

    def __init__(self, photos: PhotoSet, status: JobStatus) -> None:
        self.photos = photos
        self.status = status

    def count(self, kind: PhotoKind) -> int:
        return self.photos.count(PhotoKind(kind))

    def add(self, kind: PhotoKind, reference: str) -> int:
        """
        Append a photo reference.

        Args:
            kind: Evidence set to append to
            reference: Storage URL or encoded image

        Returns:
            int: New number of photos in that set
        """
        kind = PhotoKind(kind)
        self.photos = self.photos.with_added(kind, reference)
        return self.photos.count(kind)

    def should_auto_start(self, kind: PhotoKind) -> bool:
        """True when a start upload on a pending job should trigger the start transition."""
        return PhotoKind(kind) is PhotoKind.START and self.status is JobStatus.PENDING

    def remove_at(self, kind: PhotoKind, index: int) -> str:
        """
        Remove one photo by position.

        Args:
            kind: Evidence set to remove from
            index: Zero-based position; negative positions are rejected

        Returns:
            str: The removed reference

        Raises:
            PhotoRemovalNotAllowed: Start photos of a completed job
            PhotoIndexOutOfRange: No photo at that position
        """
        kind = PhotoKind(kind)
        if kind is PhotoKind.START and self.status is JobStatus.COMPLETED:
            raise PhotoRemovalNotAllowed(kind.value, self.status.value)

        current = self.photos.of(kind)
        if not isinstance(index, int) or index < 0 or index >= len(current):
            raise PhotoIndexOutOfRange(kind.value, index, len(current))

        removed = current[index]
        self.photos = self.photos.without(kind, index)
        return removed
