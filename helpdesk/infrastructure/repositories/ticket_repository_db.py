"""Ticket repository implementation with database"""
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from sqlalchemy import case, false, func, or_
from sqlalchemy.orm import Query, Session
from helpdesk.domain.entities.ticket import (
    AuditEntry,
    Ticket,
    TicketCategory,
    TicketPriority,
    TicketStatus,
)
from helpdesk.domain.repositories.ticket_repository import TicketFilter, TicketRepository
from helpdesk.infrastructure.database.models import TICKET_SCHEMA_VERSION, TicketModel

SEARCH_COLUMNS = (
    TicketModel.title,
    TicketModel.description,
    TicketModel.reporter_name,
    TicketModel.reporter_email,
    TicketModel.assignee,
)


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text matches literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TicketRepositoryDB(TicketRepository):
    """Ticket repository implementation with SQLAlchemy"""

    def __init__(self, db: Session):
        self.db = db

    def _model_to_entity(self, model: TicketModel) -> Ticket:
        """Convert TicketModel to Ticket entity"""
        return Ticket(
            id=str(model.id),
            title=model.title,
            description=model.description,
            reporter_name=model.reporter_name,
            reporter_email=model.reporter_email,
            priority=TicketPriority(model.priority),
            category=TicketCategory(model.category),
            status=TicketStatus(model.status),
            assignee=model.assignee or None,
            archived=bool(model.archived),
            archived_at=model.archived_at,
            archived_by=model.archived_by,
            audit=[AuditEntry.from_dict(entry) for entry in model.audit or []],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply_entity(self, model: TicketModel, ticket: Ticket) -> None:
        model.title = ticket.title
        model.description = ticket.description
        model.reporter_name = ticket.reporter_name
        model.reporter_email = ticket.reporter_email
        model.priority = ticket.priority
        model.category = ticket.category
        model.status = ticket.status
        model.assignee = ticket.assignee
        model.archived = ticket.archived
        model.archived_at = ticket.archived_at
        model.archived_by = ticket.archived_by
        model.audit = [entry.to_dict() for entry in ticket.audit]
        model.updated_at = ticket.updated_at

    def _filtered_query(self, filters: TicketFilter) -> Query:
        query = self.db.query(TicketModel)
        if filters.match_nothing:
            return query.filter(false())
        if filters.text:
            pattern = f"%{_escape_like(filters.text)}%"
            query = query.filter(or_(*[col.ilike(pattern, escape="\\") for col in SEARCH_COLUMNS]))
        if filters.status:
            query = query.filter(TicketModel.status == filters.status)
        if filters.priority:
            query = query.filter(TicketModel.priority == filters.priority)
        if filters.category:
            query = query.filter(TicketModel.category == filters.category)
        if filters.assignee:
            query = query.filter(func.lower(TicketModel.assignee) == filters.assignee.strip().lower())
        if filters.participant:
            email = filters.participant.strip().lower()
            query = query.filter(
                or_(
                    func.lower(TicketModel.assignee) == email,
                    func.lower(TicketModel.reporter_email) == email,
                )
            )
        return query

    async def create(self, ticket: Ticket) -> Ticket:
        """Create a new ticket"""
        try:
            ticket_model = TicketModel(
                id=ticket.id or None,
                schema_version=TICKET_SCHEMA_VERSION,
                created_at=ticket.created_at,
            )
            self._apply_entity(ticket_model, ticket)
            self.db.add(ticket_model)
            self.db.flush()
            self.db.commit()
            self.db.refresh(ticket_model)
            print(f"✅ Created ticket {ticket_model.id}: {ticket_model.title}")
            return self._model_to_entity(ticket_model)
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error creating ticket: {e}")
            raise

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID"""
        ticket_model = self.db.query(TicketModel).filter(TicketModel.id == ticket_id).first()
        if not ticket_model:
            return None
        return self._model_to_entity(ticket_model)

    async def get_for_update(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID with a row lock held until commit (no-op on SQLite)"""
        ticket_model = (
            self.db.query(TicketModel)
            .filter(TicketModel.id == ticket_id)
            .with_for_update()
            .first()
        )
        if not ticket_model:
            return None
        return self._model_to_entity(ticket_model)

    async def search(
        self, filters: TicketFilter, page: int, page_size: int
    ) -> Tuple[List[Ticket], int]:
        """Return one page of matching tickets, newest first, and the total"""
        query = self._filtered_query(filters)
        total = query.count()
        ticket_models = (
            query.order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return [self._model_to_entity(model) for model in ticket_models], total

    async def update(self, ticket: Ticket) -> Ticket:
        """Update ticket"""
        try:
            ticket_model = self.db.query(TicketModel).filter(TicketModel.id == ticket.id).first()
            if not ticket_model:
                raise ValueError(f"Ticket with ID '{ticket.id}' not found")

            self._apply_entity(ticket_model, ticket)
            self.db.flush()
            self.db.commit()
            self.db.refresh(ticket_model)
            return self._model_to_entity(ticket_model)
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error updating ticket {ticket.id}: {e}")
            raise

    async def touch(self, ticket_id: str, now: datetime) -> None:
        """Bump updated_at only, so concurrent audit writes are never overwritten"""
        try:
            self.db.query(TicketModel).filter(TicketModel.id == ticket_id).update(
                {
                    TicketModel.updated_at: case(
                        (TicketModel.updated_at < now, now),
                        else_=TicketModel.updated_at,
                    )
                },
                synchronize_session=False,
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error touching ticket {ticket_id}: {e}")
            raise

    async def delete(self, ticket_id: str) -> bool:
        """Delete ticket"""
        return await self.delete_many([ticket_id]) == 1

    async def delete_many(self, ticket_ids: Iterable[str]) -> int:
        """Delete tickets by ID"""
        ids = list(dict.fromkeys(ticket_ids))
        if not ids:
            return 0
        try:
            deleted = (
                self.db.query(TicketModel)
                .filter(TicketModel.id.in_(ids))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            self.db.commit()
            print(f"🗑️ Deleted {deleted} ticket(s)")
            return deleted
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error deleting tickets {ids}: {e}")
            raise
