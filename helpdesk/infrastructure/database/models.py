"""SQLAlchemy database models"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Index, JSON, Enum as SQLEnum
import uuid
from datetime import datetime
from helpdesk.infrastructure.database.base import Base
from helpdesk.domain.entities.user import UserRole
from helpdesk.domain.entities.ticket import TicketPriority, TicketStatus, TicketCategory

# Rows at this version keep their audit trail in `audit`; version 1 rows
# used the `history` column.
TICKET_SCHEMA_VERSION = 2


def get_id_column():
    """String UUID primary key, portable across PostgreSQL and SQLite"""
    return Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))


def enum_column(enum_cls, default):
    """Enum stored by value ("In Progress"), not by member name"""
    return Column(
        SQLEnum(enum_cls, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=default,
    )


class UserModel(Base):
    """User database model"""
    __tablename__ = "users"

    id = get_id_column()
    name = Column(String(80), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = enum_column(UserRole, UserRole.USER)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class TicketModel(Base):
    """Ticket database model. The audit trail is embedded as JSON."""
    __tablename__ = "tickets"

    id = get_id_column()
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=False)
    priority = enum_column(TicketPriority, TicketPriority.LOW)
    category = enum_column(TicketCategory, TicketCategory.OTHER)
    status = enum_column(TicketStatus, TicketStatus.OPEN)

    reporter_name = Column(String(80), nullable=False)
    reporter_email = Column(String(255), nullable=False, index=True)
    assignee = Column(String(255), nullable=True, index=True)

    archived = Column(Boolean, default=False, nullable=False)
    archived_at = Column(DateTime, nullable=True)
    archived_by = Column(String(255), nullable=True)

    audit = Column(JSON, nullable=False, default=list)
    # Legacy audit log location, emptied by the schema migration
    history = Column(JSON, nullable=True)
    schema_version = Column(Integer, nullable=False, default=TICKET_SCHEMA_VERSION)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_tickets_archived_updated_at", "archived", "updated_at"),)


class CommentModel(Base):
    """Comment database model

    Comments reference their ticket by ID without a foreign key; whether
    they outlive the ticket is decided by the repository's delete policy.
    """
    __tablename__ = "ticket_comments"

    id = get_id_column()
    ticket_id = Column(String(36), nullable=False, index=True)
    author = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    internal = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
