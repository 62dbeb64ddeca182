"""Archive policy gate

A ticket is either Active or Archived. While archived it is read-only; the
only update accepted is one that does nothing but unarchive it. Role checks
for the toggle itself live in access_control.
"""
from enum import Enum
from typing import Any, Mapping

from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.exceptions import TicketReadOnlyError
from helpdesk.domain.services.audit_diff import ARCHIVE_FIELD


class ArchiveState(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


def state_of(ticket: Ticket) -> ArchiveState:
    return ArchiveState.ARCHIVED if ticket.archived else ArchiveState.ACTIVE


def is_unarchive_request(update: Mapping[str, Any]) -> bool:
    return set(update) == {ARCHIVE_FIELD} and update[ARCHIVE_FIELD] is False


def ensure_editable(ticket: Ticket, update: Mapping[str, Any]) -> None:
    """Reject any update of an archived ticket other than a pure unarchive."""
    if state_of(ticket) is ArchiveState.ARCHIVED and not is_unarchive_request(update):
        raise TicketReadOnlyError()


def ensure_commentable(ticket: Ticket) -> None:
    if state_of(ticket) is ArchiveState.ARCHIVED:
        raise TicketReadOnlyError("Ticket is archived; comments are closed")
