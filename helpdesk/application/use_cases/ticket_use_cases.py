"""Ticket use cases"""
from typing import Any, Iterable, List, Optional, Tuple
from helpdesk.domain.entities.ticket import Ticket, TicketStatus
from helpdesk.domain.exceptions import NotFoundError, ValidationError
from helpdesk.domain.repositories.comment_repository import CommentRepository
from helpdesk.domain.repositories.ticket_repository import TicketFilter, TicketRepository
from helpdesk.domain.services import access_control, archive_policy
from helpdesk.domain.services.audit_diff import compute_diff
from helpdesk.application.dto.ticket_dto import (
    AuditEntryDTO,
    TicketCreateDTO,
    TicketPageDTO,
    TicketResponseDTO,
    parse_ticket_patch,
)
from datetime import datetime
import uuid

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


def normalize_pagination(
    page: Optional[int],
    page_size: Optional[int],
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Tuple[int, int]:
    """Clamp page to >= 1 and page_size to 1..max_page_size."""
    page = max(page if page is not None else 1, 1)
    page_size = page_size if page_size is not None else default_page_size
    page_size = min(max(page_size, 1), max_page_size)
    return page, page_size


def _caller(current_user: Optional[dict]) -> Tuple[Optional[str], Optional[str]]:
    """(email, role) of the verified caller, or (None, None)"""
    if not current_user:
        return None, None
    return current_user.get("email") or None, current_user.get("role")


class TicketUseCases:
    """Use cases for ticket operations"""

    def __init__(
        self,
        ticket_repository: TicketRepository,
        comment_repository: CommentRepository,
        cascade_delete_comments: bool = True,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self.ticket_repository = ticket_repository
        self.comment_repository = comment_repository
        self.cascade_delete_comments = cascade_delete_comments
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def create_ticket(self, ticket_data: TicketCreateDTO) -> TicketResponseDTO:
        """Create a new ticket. Status always starts as Open."""
        now = datetime.utcnow()
        ticket = Ticket(
            id=str(uuid.uuid4()),
            title=ticket_data.title,
            description=ticket_data.description,
            reporter_name=ticket_data.reporter_name,
            reporter_email=str(ticket_data.reporter_email),
            priority=ticket_data.priority,
            category=ticket_data.category,
            status=TicketStatus.OPEN,
            created_at=now,
            updated_at=now,
        )
        created = await self.ticket_repository.create(ticket)
        return self._ticket_to_dto(created)

    async def get_ticket(self, ticket_id: str) -> TicketResponseDTO:
        """Get ticket by ID"""
        ticket = await self.ticket_repository.get_by_id(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket with ID '{ticket_id}' not found")
        return self._ticket_to_dto(ticket)

    def resolve_filter(
        self,
        q: str = "",
        status: str = "",
        priority: str = "",
        category: str = "",
        assignee: str = "",
        mine: bool = False,
        caller_email: Optional[str] = None,
    ) -> TicketFilter:
        """Turn listing parameters into a concrete filter.

        `mine` only ever uses the verified caller's email; without one the
        filter matches nothing. The legacy `assignee` parameter is ignored
        when `mine` is set.
        """
        filters = TicketFilter(
            text=(q or "").strip() or None,
            status=(status or "").strip() or None,
            priority=(priority or "").strip() or None,
            category=(category or "").strip() or None,
        )
        if mine:
            caller_email = (caller_email or "").strip()
            if caller_email:
                filters.participant = caller_email
            else:
                filters.match_nothing = True
        elif (assignee or "").strip():
            filters.assignee = assignee.strip()
        return filters

    async def list_tickets(
        self,
        q: str = "",
        status: str = "",
        priority: str = "",
        category: str = "",
        assignee: str = "",
        mine: bool = False,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        current_user: Optional[dict] = None,
    ) -> TicketPageDTO:
        """Filtered, paginated listing, newest first"""
        caller_email, _ = _caller(current_user)
        filters = self.resolve_filter(q, status, priority, category, assignee, mine, caller_email)
        page, page_size = normalize_pagination(
            page, page_size, self.default_page_size, self.max_page_size
        )
        tickets, total = await self.ticket_repository.search(filters, page, page_size)
        return TicketPageDTO(
            data=[self._ticket_to_dto(ticket) for ticket in tickets],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def update_ticket(
        self, ticket_id: str, body: Any, current_user: Optional[dict]
    ) -> TicketResponseDTO:
        """Apply a partial update.

        Pipeline: normalize payload -> access control -> archive gate ->
        audit diff -> persist. A rejected or no-op request writes nothing.
        """
        update = parse_ticket_patch(body)
        email, role = _caller(current_user)
        access_control.ensure_authenticated(email)

        ticket = await self.ticket_repository.get_for_update(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket with ID '{ticket_id}' not found")

        access_control.ensure_can_update(ticket, update.keys(), email, role)
        archive_policy.ensure_editable(ticket, update)

        diff = compute_diff(ticket, update, actor=email)
        if not diff.has_changes:
            return self._ticket_to_dto(ticket)

        updated = await self.ticket_repository.update(diff.ticket)
        print(f"✏️ Ticket {ticket_id} updated by {email}: {', '.join(diff.changed)}")
        return self._ticket_to_dto(updated)

    async def delete_ticket(self, ticket_id: str, current_user: Optional[dict]) -> None:
        """Hard-delete one ticket (admin only)"""
        _, role = _caller(current_user)
        access_control.ensure_admin(role, "delete tickets")
        if not await self.ticket_repository.delete(ticket_id):
            raise NotFoundError(f"Ticket with ID '{ticket_id}' not found")
        await self._delete_comments([ticket_id])

    async def bulk_delete_tickets(self, ticket_ids: Iterable[Any], current_user: Optional[dict]) -> int:
        """Hard-delete a set of tickets (admin only). Returns how many existed."""
        _, role = _caller(current_user)
        access_control.ensure_admin(role, "delete tickets")
        ids = [i.strip() for i in ticket_ids if isinstance(i, str) and i.strip()]
        if not ids:
            raise ValidationError("No valid ids provided", issues={"ids": ["At least one id is required"]})
        deleted = await self.ticket_repository.delete_many(ids)
        await self._delete_comments(ids)
        return deleted

    async def _delete_comments(self, ticket_ids: List[str]) -> None:
        if self.cascade_delete_comments:
            await self.comment_repository.delete_for_tickets(ticket_ids)

    def _ticket_to_dto(self, ticket: Ticket) -> TicketResponseDTO:
        """Convert Ticket entity to TicketResponseDTO"""
        return TicketResponseDTO(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            priority=ticket.priority,
            category=ticket.category,
            status=ticket.status,
            reporter_name=ticket.reporter_name,
            reporter_email=ticket.reporter_email,
            assignee=ticket.assignee,
            archived=ticket.archived,
            archived_at=ticket.archived_at,
            archived_by=ticket.archived_by,
            audit=[
                AuditEntryDTO(
                    at=entry.at,
                    by=entry.by,
                    action=entry.action,
                    field=entry.field,
                    from_value=entry.from_value,
                    to_value=entry.to_value,
                    changes=list(entry.changes),
                )
                for entry in ticket.audit
            ],
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )
