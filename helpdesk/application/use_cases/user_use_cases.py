"""User use cases"""
from typing import List, Optional
from helpdesk.domain.entities.user import User, UserRole
from helpdesk.domain.exceptions import NotFoundError, ValidationError
from helpdesk.domain.repositories.user_repository import UserRepository
from helpdesk.application.dto.user_dto import UserCreateDTO, UserResponseDTO, UserUpdateDTO
from helpdesk.infrastructure.security.passwords import hash_password, verify_password
from datetime import datetime
import uuid


class UserUseCases:
    """Use cases for the user roster and authentication"""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def create_user(self, user_data: UserCreateDTO) -> UserResponseDTO:
        """Create a user. Raises ConflictError when the email is taken."""
        user = User(
            id=str(uuid.uuid4()),
            name=user_data.name.strip(),
            email=str(user_data.email),
            role=user_data.role,
        )
        created = await self.user_repository.create(user, hash_password(user_data.password))
        return self._user_to_dto(created)

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get user entity by ID"""
        return await self.user_repository.get_by_id(user_id)

    async def get_all_users(self) -> List[UserResponseDTO]:
        """Get all users, newest first"""
        users = await self.user_repository.get_all()
        return [self._user_to_dto(user) for user in users]

    async def update_user(self, user_id: str, user_data: UserUpdateDTO) -> UserResponseDTO:
        """Change a user's role and/or reset their password"""
        if user_data.role is None and user_data.password is None:
            raise ValidationError("Nothing to update", issues={"body": ["Provide role or password"]})

        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User with ID '{user_id}' not found")

        if user_data.role is not None:
            user.role = user_data.role
        user.updated_at = datetime.utcnow()
        password_hash = hash_password(user_data.password) if user_data.password is not None else None
        updated = await self.user_repository.update(user, password_hash=password_hash)
        return self._user_to_dto(updated)

    async def delete_user(self, user_id: str, current_user_id: Optional[str] = None) -> None:
        """Delete a user. Admins cannot delete their own account."""
        if current_user_id is not None and user_id == current_user_id:
            raise ValidationError("You cannot delete your own account")
        if not await self.user_repository.delete(user_id):
            raise NotFoundError(f"User with ID '{user_id}' not found")

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Return the user when the email/password pair is valid"""
        email = (email or "").strip().lower()
        if not email:
            return None
        password_hash = await self.user_repository.get_password_hash(email)
        if not password_hash or not verify_password(password, password_hash):
            return None
        return await self.user_repository.get_by_email(email)

    async def ensure_admin_exists(self, name: str, email: str, password: str) -> bool:
        """Create the given admin account if missing. Returns True when created."""
        if await self.user_repository.get_by_email(email):
            return False
        await self.user_repository.create(
            User(id=str(uuid.uuid4()), name=name, email=email, role=UserRole.ADMIN),
            hash_password(password),
        )
        return True

    def _user_to_dto(self, user: User) -> UserResponseDTO:
        """Convert User entity to UserResponseDTO"""
        return UserResponseDTO(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
        )
