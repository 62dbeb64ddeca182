"""Access control rules for ticket mutation and administration"""
from typing import Iterable, Optional

from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.entities.user import UserRole
from helpdesk.domain.exceptions import ForbiddenError, UnauthorizedError

ADMIN_ONLY_FIELDS = frozenset({"assignee", "archived"})


def same_identity(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive identity comparison; blanks never match."""
    if not left or not right:
        return False
    left, right = left.strip().lower(), right.strip().lower()
    return bool(left) and left == right


def is_admin(role: Optional[str]) -> bool:
    return role == UserRole.ADMIN.value


def is_assignee(ticket: Ticket, email: Optional[str]) -> bool:
    return same_identity(ticket.assignee, email)


def is_reporter(ticket: Ticket, email: Optional[str]) -> bool:
    return same_identity(ticket.reporter_email, email)


def is_staff(ticket: Ticket, email: Optional[str], role: Optional[str]) -> bool:
    """Staff for a ticket: any admin, or the ticket's assignee."""
    return is_admin(role) or is_assignee(ticket, email)


def ensure_authenticated(email: Optional[str]) -> None:
    if not email:
        raise UnauthorizedError("Authentication required")


def ensure_admin(role: Optional[str], action: str = "perform this action") -> None:
    if not is_admin(role):
        raise ForbiddenError(f"Only admins can {action}")


def ensure_can_update(
    ticket: Ticket, fields: Iterable[str], email: Optional[str], role: Optional[str]
) -> None:
    """Check the caller may change every field in `fields` on `ticket`.

    Admins may change anything. The assignee and the reporter may change the
    ordinary triage fields; assignee and the archive toggle are admin-only.
    """
    ensure_authenticated(email)
    if is_admin(role):
        return
    fields = set(fields)
    restricted = sorted(fields & ADMIN_ONLY_FIELDS)
    if restricted:
        raise ForbiddenError(f"Only admins can change: {', '.join(restricted)}")
    if not (is_assignee(ticket, email) or is_reporter(ticket, email)):
        raise ForbiddenError("Only admins, the assignee or the reporter can update this ticket")
