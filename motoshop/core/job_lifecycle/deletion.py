"""
Two-step deletion confirmation.

Job deletion is irreversible, so a ticket has to be confirmed twice
("delete this job?" then "are you absolutely sure?") before the
synchronizer is allowed to issue the remote delete. Cancelling at any
step discards the ticket and leaves the job untouched.

Dependencies: uuid, dataclasses
System role: Confirmation gate in front of job deletion
"""

import enum
import uuid
from dataclasses import dataclass, replace

from motoshop.core.exceptions import DeletionNotConfirmed, NotFound, ValidationError

REQUIRED_CONFIRMATIONS = 2


class DeletionStage(str, enum.Enum):
    """Where a deletion ticket is in the confirmation flow."""

    AWAITING_FIRST = "awaiting_first_confirmation"
    AWAITING_SECOND = "awaiting_final_confirmation"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class DeletionTicket:
    """A pending request to delete one job."""

    id: str
    job_id: str
    confirmations: int = 0

    @property
    def stage(self) -> DeletionStage:
        if self.confirmations == 0:
            return DeletionStage.AWAITING_FIRST
        if self.confirmations < REQUIRED_CONFIRMATIONS:
            return DeletionStage.AWAITING_SECOND
        return DeletionStage.CONFIRMED

    @property
    def is_confirmed(self) -> bool:
        return self.confirmations >= REQUIRED_CONFIRMATIONS


class DeletionGate:
    """
    Registry of deletion tickets awaiting confirmation.

    One ticket per job; beginning again for the same job restarts the
    confirmation count.
    """

    def __init__(self) -> None:
        self._tickets: dict[str, DeletionTicket] = {}

    def begin(self, job_id: str) -> DeletionTicket:
        """Open a new ticket for job_id, replacing any earlier one."""
        for ticket_id, ticket in list(self._tickets.items()):
            if ticket.job_id == job_id:
                del self._tickets[ticket_id]
        ticket = DeletionTicket(id=str(uuid.uuid4()), job_id=job_id)
        self._tickets[ticket.id] = ticket
        return ticket

    def get(self, ticket_id: str, job_id: str) -> DeletionTicket:
        ticket = self._tickets.get(ticket_id)
        if ticket is None or ticket.job_id != job_id:
            raise NotFound("deletion_tickets", ticket_id)
        return ticket

    def confirm(self, ticket_id: str, job_id: str) -> DeletionTicket:
        """
        Record one confirmation.

        Raises:
            NotFound: Unknown or cancelled ticket
            ValidationError: Ticket already fully confirmed
        """
        ticket = self.get(ticket_id, job_id)
        if ticket.is_confirmed:
            raise ValidationError("Deletion already confirmed", field="ticket_id")
        ticket = replace(ticket, confirmations=ticket.confirmations + 1)
        self._tickets[ticket_id] = ticket
        return ticket

    def cancel(self, ticket_id: str, job_id: str) -> None:
        self.get(ticket_id, job_id)
        del self._tickets[ticket_id]

    def authorize(self, ticket_id: str, job_id: str) -> DeletionTicket:
        """
        Check that ticket carries both confirmations.

        Raises:
            NotFound: Unknown or cancelled ticket
            DeletionNotConfirmed: Fewer than two confirmations
        """
        ticket = self.get(ticket_id, job_id)
        if not ticket.is_confirmed:
            raise DeletionNotConfirmed(job_id, ticket.confirmations, REQUIRED_CONFIRMATIONS)
        return ticket

    def discard(self, ticket_id: str) -> None:
        self._tickets.pop(ticket_id, None)
