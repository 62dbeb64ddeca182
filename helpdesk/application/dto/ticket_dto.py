"""Ticket DTOs"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    EmailStr,
    Field,
    StrictBool,
    Tag,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from helpdesk.domain.entities.ticket import TicketCategory, TicketPriority, TicketStatus
from helpdesk.domain.exceptions import ValidationError
from helpdesk.domain.services.audit_diff import ALLOWED_FIELDS


class CamelModel(BaseModel):
    """Base DTO exchanging camelCase JSON keys"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TicketCreateDTO(CamelModel):
    """DTO for creating a ticket. Any status sent by the client is ignored."""
    title: str = Field(min_length=3, max_length=120)
    description: str = Field(min_length=5, max_length=2000)
    reporter_name: str = Field(min_length=2, max_length=80)
    reporter_email: EmailStr
    priority: TicketPriority = TicketPriority.LOW
    category: TicketCategory = TicketCategory.OTHER

    @field_validator("title", "description", "reporter_name", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class TicketPatchDTO(CamelModel):
    """Canonical partial update. Only keys the client actually sent are applied."""
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    category: Optional[TicketCategory] = None
    description: Optional[str] = Field(default=None, min_length=5, max_length=2000)
    assignee: Optional[str] = Field(default=None, max_length=255)
    archived: Optional[StrictBool] = None

    @field_validator("assignee", mode="before")
    @classmethod
    def normalize_assignee(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def to_update(self) -> Dict[str, Any]:
        """Mapping of field name to new value, in allow-list order.

        An explicit null clears the assignee; for every other field a null is
        treated as "not sent".
        """
        update: Dict[str, Any] = {}
        for name in ALLOWED_FIELDS:
            if name not in self.model_fields_set:
                continue
            value = getattr(self, name)
            if value is None and name != "assignee":
                continue
            update[name] = value
        return update


class FieldValuePatchDTO(BaseModel):
    """`{"field": "status", "value": "Closed"}`"""
    field: str
    value: Any = None

    def to_patch(self) -> TicketPatchDTO:
        if self.field not in ALLOWED_FIELDS:
            raise ValidationError(
                f"Field '{self.field}' cannot be updated",
                issues={"field": [f"Must be one of: {', '.join(ALLOWED_FIELDS)}"]},
            )
        return TicketPatchDTO.model_validate({self.field: self.value})


class NestedPatchDTO(BaseModel):
    """`{"update": {...}}`, optionally with a top-level archive toggle"""
    update: Dict[str, Any]
    archived: Optional[StrictBool] = None

    def to_patch(self) -> TicketPatchDTO:
        data = dict(self.update)
        if "archived" in self.model_fields_set:
            data["archived"] = self.archived
        return TicketPatchDTO.model_validate(data)


class FlatPatchDTO(TicketPatchDTO):
    """A flat partial ticket object"""

    def to_patch(self) -> TicketPatchDTO:
        return self


def _patch_kind(value: Any) -> str:
    if isinstance(value, dict):
        if "field" in value and "value" in value:
            return "field"
        if isinstance(value.get("update"), dict):
            return "nested"
        return "flat"
    if isinstance(value, FieldValuePatchDTO):
        return "field"
    if isinstance(value, NestedPatchDTO):
        return "nested"
    return "flat"


TicketPatchRequest = Annotated[
    Union[
        Annotated[FieldValuePatchDTO, Tag("field")],
        Annotated[NestedPatchDTO, Tag("nested")],
        Annotated[FlatPatchDTO, Tag("flat")],
    ],
    Discriminator(_patch_kind),
]

_patch_adapter = TypeAdapter(TicketPatchRequest)


def _issues_from(error: PydanticValidationError, skip: int = 0) -> Dict[str, List[str]]:
    issues: Dict[str, List[str]] = {}
    for item in error.errors():
        loc = [str(part) for part in item.get("loc", ())[skip:]] or ["body"]
        issues.setdefault(".".join(loc), []).append(item.get("msg", "Invalid value"))
    return issues


def parse_ticket_patch(body: Any) -> Dict[str, Any]:
    """Normalize any accepted PATCH body shape into one update mapping."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    body = {key: value for key, value in body.items() if key not in ("id", "_id")}
    try:
        request = _patch_adapter.validate_python(body)
    except PydanticValidationError as e:
        # skip the union tag at the head of each error location
        raise ValidationError("Validation failed", issues=_issues_from(e, skip=1))
    try:
        update = request.to_patch().to_update()
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", issues=_issues_from(e))
    if not update:
        raise ValidationError("No valid fields to update")
    return update


class AuditEntryDTO(CamelModel):
    """DTO for one audit entry"""
    at: datetime
    by: str
    action: str
    field: Optional[str] = None
    from_value: Any = Field(default=None, alias="from")
    to_value: Any = Field(default=None, alias="to")
    changes: List[str] = []


class TicketResponseDTO(CamelModel):
    """DTO for ticket response"""
    id: str
    title: str
    description: str
    priority: TicketPriority
    category: TicketCategory
    status: TicketStatus
    reporter_name: str
    reporter_email: str
    assignee: Optional[str] = None
    archived: bool = False
    archived_at: Optional[datetime] = None
    archived_by: Optional[str] = None
    audit: List[AuditEntryDTO] = []
    created_at: datetime
    updated_at: datetime


class TicketPageDTO(CamelModel):
    """One page of a ticket listing"""
    data: List[TicketResponseDTO]
    total: int
    page: int
    page_size: int


class BulkDeleteDTO(BaseModel):
    """DTO for bulk ticket deletion"""
    ids: List[str] = []


class BulkDeleteResultDTO(BaseModel):
    deleted: int


class CommentCreateDTO(BaseModel):
    """DTO for creating a comment"""
    body: str = Field(default="", max_length=5000)
    internal: bool = False


class CommentResponseDTO(CamelModel):
    """DTO for comment response"""
    id: str
    ticket_id: str
    author: str
    body: str
    internal: bool
    created_at: datetime
