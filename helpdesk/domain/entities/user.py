"""User domain entity"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """User roles enum"""
    ADMIN = "admin"
    USER = "user"


@dataclass
class User:
    """User domain entity. The password hash stays in the repository layer."""
    id: str
    name: str
    email: str
    role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.email = self.email.strip().lower()
        if self.created_at is None:
            self.created_at = datetime.utcnow()
        if self.updated_at is None:
            self.updated_at = datetime.utcnow()
