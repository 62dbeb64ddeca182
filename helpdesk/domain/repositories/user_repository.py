"""User repository interface"""
from abc import ABC, abstractmethod
from typing import List, Optional
from helpdesk.domain.entities.user import User


class UserRepository(ABC):
    """Interface for user repository"""

    @abstractmethod
    async def create(self, user: User, password_hash: str) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)"""
        pass

    @abstractmethod
    async def get_all(self) -> List[User]:
        """Get all users, newest first"""
        pass

    @abstractmethod
    async def update(self, user: User, password_hash: Optional[str] = None) -> User:
        """Update user, optionally replacing the password hash"""
        pass

    @abstractmethod
    async def get_password_hash(self, email: str) -> Optional[str]:
        """Get the stored password hash for an email"""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete user"""
        pass
