"""Ticket comments API router"""
from typing import List
from fastapi import APIRouter, Depends, status
from helpdesk.application.dto.ticket_dto import CommentCreateDTO, CommentResponseDTO
from helpdesk.application.use_cases.comment_use_cases import CommentUseCases
from helpdesk.domain.exceptions import HelpdeskError
from helpdesk.presentation.api.v1.dependencies import (
    get_comment_use_cases,
    get_current_user,
    no_cache,
)
from helpdesk.presentation.api.v1.errors import http_error

router = APIRouter(prefix="/tickets", tags=["comments"], dependencies=[Depends(no_cache)])


@router.get("/{ticket_id}/comments", response_model=List[CommentResponseDTO])
async def list_comments(
    ticket_id: str,
    use_cases: CommentUseCases = Depends(get_comment_use_cases),
    current_user: dict = Depends(get_current_user),
):
    """Comments of a ticket, oldest first

    Internal comments are only returned to admins and the ticket's assignee.
    """
    try:
        return await use_cases.list_comments(ticket_id, current_user)
    except HelpdeskError as e:
        raise http_error(e)


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    ticket_id: str,
    comment_data: CommentCreateDTO,
    use_cases: CommentUseCases = Depends(get_comment_use_cases),
    current_user: dict = Depends(get_current_user),
):
    """Add comment to ticket

    Rejected on archived tickets. Only staff may post internal comments.
    """
    try:
        return await use_cases.add_comment(ticket_id, comment_data, current_user)
    except HelpdeskError as e:
        raise http_error(e)
