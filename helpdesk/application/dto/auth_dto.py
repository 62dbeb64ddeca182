"""Authentication DTOs"""
from pydantic import BaseModel


class LoginDTO(BaseModel):
    """DTO for user login"""
    email: str
    password: str


class TokenResponseDTO(BaseModel):
    """DTO for token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user: dict
