"""Authentication API router"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from helpdesk.application.dto.auth_dto import LoginDTO, TokenResponseDTO
from helpdesk.application.use_cases.user_use_cases import UserUseCases
from helpdesk.infrastructure.config.settings import Settings
from helpdesk.infrastructure.security.jwt import create_access_token
from helpdesk.presentation.api.v1.dependencies import (
    get_current_user,
    get_settings,
    get_user_use_cases,
    no_cache,
)

router = APIRouter(prefix="/auth", tags=["authentication"], dependencies=[Depends(no_cache)])


@router.post("/login", response_model=TokenResponseDTO)
async def login(
    login_data: LoginDTO,
    response: Response,
    use_cases: UserUseCases = Depends(get_user_use_cases),
    settings: Settings = Depends(get_settings),
):
    """
    Authenticate user and return JWT token

    The token is also set as an HTTP-only session cookie.
    """
    user = await use_cases.authenticate_user(login_data.email, login_data.password)
    if not user:
        print(f"Authentication failed for: {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    expires_in = settings.JWT_EXPIRE_HOURS * 3600
    access_token = create_access_token(
        data={"sub": user.id, "email": user.email, "role": user.role.value},
        settings=settings,
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=expires_in,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )

    return TokenResponseDTO(
        access_token=access_token,
        token_type="bearer",
        expires_in=expires_in,
        user={
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
        },
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings),
):
    """Clear the session cookie"""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


@router.get("/me", response_model=dict)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
):
    """Get current authenticated user information"""
    return current_user
