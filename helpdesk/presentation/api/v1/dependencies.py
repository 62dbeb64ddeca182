"""API dependencies"""
from typing import Iterator, Optional
from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from helpdesk.infrastructure.config.settings import Settings
from helpdesk.infrastructure.database.base import Database
from helpdesk.infrastructure.repositories.user_repository_db import UserRepositoryDB
from helpdesk.infrastructure.repositories.ticket_repository_db import TicketRepositoryDB
from helpdesk.infrastructure.repositories.comment_repository_db import CommentRepositoryDB
from helpdesk.application.use_cases.user_use_cases import UserUseCases
from helpdesk.application.use_cases.ticket_use_cases import TicketUseCases
from helpdesk.application.use_cases.comment_use_cases import CommentUseCases
from helpdesk.domain.services.access_control import is_admin
from helpdesk.infrastructure.security.jwt import decode_access_token

# HTTP Bearer token scheme (optional; the session cookie is the fallback)
security = HTTPBearer(auto_error=False)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
}


def get_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Database handle owned by the application lifespan"""
    return request.app.state.database


def get_db(database: Database = Depends(get_database)) -> Iterator[Session]:
    """Get database session for the duration of a request"""
    yield from database.session()


def no_cache(response: Response) -> None:
    """Mark the response as never cacheable"""
    response.headers.update(NO_STORE_HEADERS)


def get_user_use_cases(db: Session = Depends(get_db)) -> UserUseCases:
    """Get user use cases instance with database session"""
    return UserUseCases(UserRepositoryDB(db))


def get_ticket_use_cases(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TicketUseCases:
    """Get ticket use cases instance with database session"""
    return TicketUseCases(
        TicketRepositoryDB(db),
        CommentRepositoryDB(db),
        cascade_delete_comments=settings.CASCADE_DELETE_COMMENTS,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )


def get_comment_use_cases(db: Session = Depends(get_db)) -> CommentUseCases:
    """Get comment use cases instance with database session"""
    return CommentUseCases(CommentRepositoryDB(db), TicketRepositoryDB(db))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _resolve_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    settings: Settings,
    use_cases: UserUseCases,
) -> Optional[dict]:
    """
    Resolve the caller from the Bearer token or the session cookie

    Returns:
        User data dictionary, or None when no valid credentials were sent
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    payload = decode_access_token(token, settings)
    if payload is None or not payload.get("sub"):
        return None

    # the token subject must still exist; deleted users lose access immediately
    user = await use_cases.get_user(payload["sub"])
    if user is None:
        return None

    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
    use_cases: UserUseCases = Depends(get_user_use_cases),
) -> Optional[dict]:
    """Current user when authenticated, otherwise None"""
    return await _resolve_user(request, credentials, settings, use_cases)


async def get_current_user(
    current_user: Optional[dict] = Depends(get_optional_user),
) -> dict:
    """
    Get current authenticated user

    Raises:
        HTTPException: If no valid token or session cookie was sent
    """
    if current_user is None:
        raise _unauthorized("Authentication required")
    return current_user


def get_admin_user(
    current_user: dict = Depends(get_current_user),
) -> dict:
    """Get current admin user"""
    if not is_admin(current_user.get("role")):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    return current_user


def get_ticket_reader(
    current_user: Optional[dict] = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
) -> Optional[dict]:
    """Caller for ticket reads; anonymous only when PUBLIC_TICKET_READS is on"""
    if current_user is None and not settings.PUBLIC_TICKET_READS:
        raise _unauthorized("Authentication required")
    return current_user
