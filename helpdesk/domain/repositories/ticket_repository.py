"""Ticket repository interface"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from helpdesk.domain.entities.ticket import Ticket


@dataclass
class TicketFilter:
    """Resolved listing filter. All set predicates are ANDed together."""
    text: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    # exact, case-insensitive match on assignee
    assignee: Optional[str] = None
    # exact, case-insensitive match on assignee OR reporter email
    participant: Optional[str] = None
    match_nothing: bool = False


class TicketRepository(ABC):
    """Interface for ticket repository"""

    @abstractmethod
    async def create(self, ticket: Ticket) -> Ticket:
        """Create a new ticket"""
        pass

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID"""
        pass

    @abstractmethod
    async def get_for_update(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID, locking the row until the next commit"""
        pass

    @abstractmethod
    async def search(
        self, filters: TicketFilter, page: int, page_size: int
    ) -> Tuple[List[Ticket], int]:
        """Return one page of matching tickets, newest first, and the total match count"""
        pass

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        """Update ticket"""
        pass

    @abstractmethod
    async def touch(self, ticket_id: str, now: datetime) -> None:
        """Advance updated_at to `now` without writing any other column"""
        pass

    @abstractmethod
    async def delete(self, ticket_id: str) -> bool:
        """Delete ticket"""
        pass

    @abstractmethod
    async def delete_many(self, ticket_ids: Iterable[str]) -> int:
        """Delete tickets by ID, returning how many existed"""
        pass
