"""Comment domain entity"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Comment:
    """A message attached to a ticket. Internal comments are staff-only."""
    id: str
    ticket_id: str
    author: str
    body: str
    internal: bool = False
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.utcnow()
