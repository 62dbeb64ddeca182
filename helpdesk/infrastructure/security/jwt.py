"""JWT token utilities"""
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from helpdesk.infrastructure.config.settings import Settings


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Dictionary with data to encode in token (e.g., {"sub": user_id, "email": email})
        settings: Settings providing the signing key and algorithm
        expires_delta: Optional expiration time delta. Defaults to JWT_EXPIRE_HOURS

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(hours=settings.JWT_EXPIRE_HOURS))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.get_jwt_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Optional[dict]:
    """
    Decode and verify a JWT access token

    Returns:
        Decoded token payload or None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.get_jwt_secret(), algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
