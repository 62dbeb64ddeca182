"""Comment repository interface"""
from abc import ABC, abstractmethod
from typing import Iterable, List
from helpdesk.domain.entities.comment import Comment


class CommentRepository(ABC):
    """Interface for comment repository. Comments are append-only."""

    @abstractmethod
    async def create(self, comment: Comment) -> Comment:
        """Append a comment"""
        pass

    @abstractmethod
    async def list_for_ticket(self, ticket_id: str) -> List[Comment]:
        """Get all comments of a ticket, oldest first"""
        pass

    @abstractmethod
    async def delete_for_tickets(self, ticket_ids: Iterable[str]) -> int:
        """Remove the comments of deleted tickets"""
        pass
