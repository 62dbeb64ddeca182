"""User DTOs"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field
from helpdesk.application.dto.ticket_dto import CamelModel
from helpdesk.domain.entities.user import UserRole


class UserCreateDTO(BaseModel):
    """DTO for creating a user (admin only)"""
    name: str = Field(min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)
    role: UserRole = UserRole.USER


class UserUpdateDTO(BaseModel):
    """DTO for updating a user: role change and/or password reset"""
    role: Optional[UserRole] = None
    password: Optional[str] = Field(default=None, min_length=1, max_length=72)


class UserResponseDTO(CamelModel):
    """DTO for user response. Never carries the password hash."""
    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime


class UserEnvelopeDTO(BaseModel):
    data: UserResponseDTO


class UserListDTO(BaseModel):
    data: List[UserResponseDTO]
