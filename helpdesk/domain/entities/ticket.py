"""Ticket domain entity"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, List, Optional


class TicketPriority(str, Enum):
    """Ticket priority levels"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class TicketStatus(str, Enum):
    """Ticket status"""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class TicketCategory(str, Enum):
    """Ticket categories"""
    HARDWARE = "Hardware"
    SOFTWARE = "Software"
    NETWORK = "Network"
    OTHER = "Other"


@dataclass(frozen=True)
class AuditEntry:
    """One recorded change on a ticket. Entries are never modified once created."""
    at: datetime
    by: str
    changes: List[str]
    action: str = "update"
    field: Optional[str] = None
    from_value: Any = None
    to_value: Any = None

    def to_dict(self) -> dict:
        """Serialize for JSON storage"""
        return {
            "at": self.at.isoformat(),
            "by": self.by,
            "action": self.action,
            "field": self.field,
            "from": self.from_value,
            "to": self.to_value,
            "changes": list(self.changes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEntry":
        at = data.get("at")
        if isinstance(at, str):
            at = datetime.fromisoformat(at.replace("Z", "+00:00")).replace(tzinfo=None)
        return cls(
            at=at,
            by=data.get("by") or "System",
            action=data.get("action") or "update",
            field=data.get("field"),
            from_value=data.get("from"),
            to_value=data.get("to"),
            changes=list(data.get("changes") or []),
        )


@dataclass
class Ticket:
    """Ticket domain entity"""
    id: str
    title: str
    description: str
    reporter_name: str
    reporter_email: str
    priority: TicketPriority = TicketPriority.LOW
    category: TicketCategory = TicketCategory.OTHER
    status: TicketStatus = TicketStatus.OPEN
    assignee: Optional[str] = None
    archived: bool = False
    archived_at: Optional[datetime] = None
    archived_by: Optional[str] = None
    audit: List[AuditEntry] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.utcnow()
        if self.updated_at is None:
            self.updated_at = self.created_at

    def touch(self, now: Optional[datetime] = None) -> datetime:
        """Advance updated_at, never letting it go backwards or stand still."""
        now = now or datetime.utcnow()
        if self.updated_at is not None and now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now
        return now


