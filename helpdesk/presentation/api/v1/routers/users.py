"""Users API router"""
from fastapi import APIRouter, Depends, status
from helpdesk.application.dto.user_dto import (
    UserCreateDTO,
    UserEnvelopeDTO,
    UserListDTO,
    UserUpdateDTO,
)
from helpdesk.application.use_cases.user_use_cases import UserUseCases
from helpdesk.domain.exceptions import HelpdeskError
from helpdesk.presentation.api.v1.dependencies import (
    get_admin_user,
    get_user_use_cases,
    no_cache,
)
from helpdesk.presentation.api.v1.errors import http_error

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(no_cache)])


@router.get("", response_model=UserListDTO)
async def get_all_users(
    use_cases: UserUseCases = Depends(get_user_use_cases),
    current_user: dict = Depends(get_admin_user),
):
    """List users, newest first (Admin only)"""
    return UserListDTO(data=await use_cases.get_all_users())


@router.post("", response_model=UserEnvelopeDTO, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreateDTO,
    use_cases: UserUseCases = Depends(get_user_use_cases),
    current_user: dict = Depends(get_admin_user),
):
    """Add a new user (Admin only). There is no public registration."""
    try:
        return UserEnvelopeDTO(data=await use_cases.create_user(user_data))
    except HelpdeskError as e:
        raise http_error(e)


@router.patch("/{user_id}", response_model=UserEnvelopeDTO)
async def update_user(
    user_id: str,
    user_data: UserUpdateDTO,
    use_cases: UserUseCases = Depends(get_user_use_cases),
    current_user: dict = Depends(get_admin_user),
):
    """Change role and/or reset password (Admin only)"""
    try:
        return UserEnvelopeDTO(data=await use_cases.update_user(user_id, user_data))
    except HelpdeskError as e:
        raise http_error(e)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    use_cases: UserUseCases = Depends(get_user_use_cases),
    current_user: dict = Depends(get_admin_user),
):
    """Delete user (Admin only)

    Tickets keep the reporter and assignee emails they were filed with.
    """
    try:
        await use_cases.delete_user(user_id, current_user_id=current_user.get("id"))
    except HelpdeskError as e:
        raise http_error(e)
