"""Comment use cases"""
from typing import List, Optional
from helpdesk.domain.entities.comment import Comment
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from helpdesk.domain.repositories.comment_repository import CommentRepository
from helpdesk.domain.repositories.ticket_repository import TicketRepository
from helpdesk.domain.services import access_control, archive_policy
from helpdesk.application.dto.ticket_dto import CommentCreateDTO, CommentResponseDTO
from datetime import datetime
import uuid

UNKNOWN_AUTHOR = "unknown"


class CommentUseCases:
    """Use cases for ticket comments"""

    def __init__(self, comment_repository: CommentRepository, ticket_repository: TicketRepository):
        self.comment_repository = comment_repository
        self.ticket_repository = ticket_repository

    async def _get_ticket(self, ticket_id: str, for_update: bool = False) -> Ticket:
        if for_update:
            ticket = await self.ticket_repository.get_for_update(ticket_id)
        else:
            ticket = await self.ticket_repository.get_by_id(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket with ID '{ticket_id}' not found")
        return ticket

    async def add_comment(
        self, ticket_id: str, comment_data: CommentCreateDTO, current_user: Optional[dict]
    ) -> CommentResponseDTO:
        """Append a comment. Touches the ticket's updated_at but not its audit log."""
        ticket = await self._get_ticket(ticket_id, for_update=True)
        archive_policy.ensure_commentable(ticket)

        body = (comment_data.body or "").strip()
        if not body:
            raise ValidationError("Comment body is required", issues={"body": ["Must not be empty"]})

        current_user = current_user or {}
        email, role = current_user.get("email"), current_user.get("role")
        if comment_data.internal and not access_control.is_staff(ticket, email, role):
            raise ForbiddenError("Only staff can add internal comments")

        now = datetime.utcnow()
        comment = await self.comment_repository.create(
            Comment(
                id=str(uuid.uuid4()),
                ticket_id=ticket.id,
                author=email or UNKNOWN_AUTHOR,
                body=body,
                internal=comment_data.internal,
                created_at=now,
            )
        )
        # only updated_at; an update committed since the read keeps its audit
        await self.ticket_repository.touch(ticket.id, ticket.touch(now))
        return self._comment_to_dto(comment)

    async def list_comments(self, ticket_id: str, current_user: Optional[dict]) -> List[CommentResponseDTO]:
        """Comments of a ticket, oldest first. Internal ones only for staff."""
        ticket = await self._get_ticket(ticket_id)
        comments = await self.comment_repository.list_for_ticket(ticket_id)
        current_user = current_user or {}
        if not access_control.is_staff(ticket, current_user.get("email"), current_user.get("role")):
            comments = [comment for comment in comments if not comment.internal]
        return [self._comment_to_dto(comment) for comment in comments]

    def _comment_to_dto(self, comment: Comment) -> CommentResponseDTO:
        """Convert Comment entity to CommentResponseDTO"""
        return CommentResponseDTO(
            id=comment.id,
            ticket_id=comment.ticket_id,
            author=comment.author,
            body=comment.body,
            internal=comment.internal,
            created_at=comment.created_at,
        )
