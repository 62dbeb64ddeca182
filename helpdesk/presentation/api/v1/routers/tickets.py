"""Tickets API router"""
from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from helpdesk.application.dto.ticket_dto import (
    BulkDeleteDTO,
    BulkDeleteResultDTO,
    TicketCreateDTO,
    TicketPageDTO,
    TicketResponseDTO,
)
from helpdesk.application.use_cases.ticket_use_cases import TicketUseCases
from helpdesk.domain.exceptions import HelpdeskError
from helpdesk.presentation.api.v1.dependencies import (
    get_current_user,
    get_ticket_reader,
    get_ticket_use_cases,
    no_cache,
)
from helpdesk.presentation.api.v1.errors import http_error

router = APIRouter(prefix="/tickets", tags=["tickets"], dependencies=[Depends(no_cache)])


@router.get("", response_model=TicketPageDTO)
async def list_tickets(
    q: str = "",
    status_filter: str = Query("", alias="status"),
    priority: str = "",
    category: str = "",
    assignee: str = "",
    mine: str = "",
    page: Optional[int] = None,
    page_size: Optional[int] = Query(None, alias="pageSize"),
    use_cases: TicketUseCases = Depends(get_ticket_use_cases),
    current_user: Optional[dict] = Depends(get_ticket_reader),
):
    """List tickets

    - `q`: case-insensitive text search over title, description, reporter and assignee
    - `status`, `priority`, `category`: exact filters
    - `mine=1`: tickets the caller reports or is assigned to (empty when anonymous)
    - `assignee`: legacy exact filter, ignored with `mine=1`
    """
    return await use_cases.list_tickets(
        q=q,
        status=status_filter,
        priority=priority,
        category=category,
        assignee=assignee,
        mine=mine.strip().lower() in ("1", "true"),
        page=page,
        page_size=page_size,
        current_user=current_user,
    )


@router.post("", response_model=TicketResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    ticket_data: TicketCreateDTO,
    use_cases: TicketUseCases = Depends(get_ticket_use_cases),
    current_user: dict = Depends(get_current_user),
):
    """Create a new ticket

    Any authenticated user can create a ticket. Status always starts as Open.
    """
    return await use_cases.create_ticket(ticket_data)


@router.post("/bulk-delete", response_model=BulkDeleteResultDTO)
async def bulk_delete_tickets(
    payload: BulkDeleteDTO,
    use_cases: TicketUseCases = Depends(get_ticket_use_cases),
    current_user: dict = Depends(get_current_user),
):
    """Delete several tickets at once (Admin only)"""
    try:
        deleted = await use_cases.bulk_delete_tickets(payload.ids, current_user)
    except HelpdeskError as e:
        raise http_error(e)
    return BulkDeleteResultDTO(deleted=deleted)


@router.get("/{ticket_id}", response_model=TicketResponseDTO)
async def get_ticket(
    ticket_id: str,
    use_cases: TicketUseCases = Depends(get_ticket_use_cases),
    current_user: Optional[dict] = Depends(get_ticket_reader),
):
    """Get ticket by ID, including its audit log"""
    try:
        return await use_cases.get_ticket(ticket_id)
    except HelpdeskError as e:
        raise http_error(e)


@router.patch("/{ticket_id}", response_model=TicketResponseDTO)
async def update_ticket(
    ticket_id: str,
    body: Any = Body(None),
    use_cases: TicketUseCases = Depends(get_ticket_use_cases),
    current_user: dict = Depends(get_current_user),
):
    """Update ticket

    Accepts `{"field": ..., "value": ...}`, `{"update": {...}}` or a flat
    partial object. Admins can change anything; the assignee and the reporter
    can change status, priority, category and description. Archived tickets
    only accept `{"archived": false}` from an admin.
    """
    try:
        return await use_cases.update_ticket(ticket_id, body, current_user)
    except HelpdeskError as e:
        raise http_error(e)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket(
    ticket_id: str,
    use_cases: TicketUseCases = Depends(get_ticket_use_cases),
    current_user: dict = Depends(get_current_user),
):
    """Delete ticket (Admin only)"""
    try:
        await use_cases.delete_ticket(ticket_id, current_user)
    except HelpdeskError as e:
        raise http_error(e)
