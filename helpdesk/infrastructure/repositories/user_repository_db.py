"""User repository implementation with database"""
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from helpdesk.domain.entities.user import User, UserRole
from helpdesk.domain.exceptions import ConflictError
from helpdesk.domain.repositories.user_repository import UserRepository
from helpdesk.infrastructure.database.models import UserModel


class UserRepositoryDB(UserRepository):
    """User repository implementation with SQLAlchemy"""

    def __init__(self, db: Session):
        self.db = db

    def _model_to_entity(self, model: UserModel) -> User:
        """Convert UserModel to User entity"""
        return User(
            id=str(model.id),
            name=model.name,
            email=model.email,
            role=UserRole(model.role),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _get_model(self, user_id: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    async def create(self, user: User, password_hash: str) -> User:
        """Create a new user"""
        existing = await self.get_by_email(user.email)
        if existing:
            raise ConflictError(f"User with email '{user.email}' already exists")

        user_model = UserModel(
            id=user.id or None,
            name=user.name,
            email=user.email,
            password_hash=password_hash,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        try:
            self.db.add(user_model)
            self.db.commit()
        except IntegrityError:
            # lost a race against a concurrent insert of the same email
            self.db.rollback()
            raise ConflictError(f"User with email '{user.email}' already exists")
        self.db.refresh(user_model)
        return self._model_to_entity(user_model)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        user_model = self._get_model(user_id)
        if not user_model:
            return None
        return self._model_to_entity(user_model)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        user_model = self.db.query(UserModel).filter(UserModel.email == email.strip().lower()).first()
        if not user_model:
            return None
        return self._model_to_entity(user_model)

    async def get_all(self) -> List[User]:
        """Get all users, newest first"""
        user_models = self.db.query(UserModel).order_by(UserModel.created_at.desc()).all()
        return [self._model_to_entity(model) for model in user_models]

    async def update(self, user: User, password_hash: Optional[str] = None) -> User:
        """Update user"""
        user_model = self._get_model(user.id)
        if not user_model:
            raise ValueError(f"User with ID '{user.id}' not found")

        user_model.name = user.name
        user_model.role = user.role
        user_model.updated_at = user.updated_at
        if password_hash is not None:
            user_model.password_hash = password_hash

        self.db.commit()
        self.db.refresh(user_model)
        return self._model_to_entity(user_model)

    async def get_password_hash(self, email: str) -> Optional[str]:
        """Get the stored password hash for an email"""
        user_model = self.db.query(UserModel).filter(UserModel.email == email.strip().lower()).first()
        if not user_model:
            return None
        return user_model.password_hash

    async def delete(self, user_id: str) -> bool:
        """Delete user. Tickets keep their denormalized reporter/assignee emails."""
        try:
            user_model = self._get_model(user_id)
            if not user_model:
                return False
            email = user_model.email
            self.db.delete(user_model)
            self.db.flush()
            self.db.commit()
            print(f"🗑️ Deleted user {user_id} ({email})")
            return True
        except Exception as e:
            self.db.rollback()
            print(f"❌ Error deleting user {user_id}: {e}")
            raise
