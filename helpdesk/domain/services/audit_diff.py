"""Audit diff engine

Compares a proposed partial update against a ticket's stored state and
produces the merged ticket plus one audit entry per changed field.
"""
import dataclasses
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from helpdesk.domain.entities.ticket import AuditEntry, Ticket
from helpdesk.domain.exceptions import ValidationError

EMPTY_PLACEHOLDER = "—"
ARROW = "→"
UNKNOWN_ACTOR = "Unknown"

ARCHIVE_FIELD = "archived"
TRACKED_FIELDS = ("status", "priority", "category", "description", "assignee")
ALLOWED_FIELDS = TRACKED_FIELDS + (ARCHIVE_FIELD,)

FIELD_LABELS = {
    "status": "Status",
    "priority": "Priority",
    "category": "Category",
    "description": "Description",
    "assignee": "Assignee",
}

ARCHIVED_TEXT = "Archived ticket"
RESTORED_TEXT = "Restored from archive"


def field_label(name: str) -> str:
    """Display label for a field: known override or title-cased words."""
    if name in FIELD_LABELS:
        return FIELD_LABELS[name]
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name).replace("_", " ")
    return " ".join(word.capitalize() for word in spaced.split())


def raw_value(value: Any) -> Any:
    """JSON-safe form of a field value as stored in the audit log"""
    if isinstance(value, Enum):
        return value.value
    return value


def display_value(value: Any) -> str:
    value = raw_value(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        return EMPTY_PLACEHOLDER
    return str(value)


def describe_change(field: str, from_value: Any, to_value: Any) -> str:
    """Human-readable line for one field change, e.g. 'Status: Open → Closed'."""
    if field == ARCHIVE_FIELD:
        return ARCHIVED_TEXT if to_value else RESTORED_TEXT
    return f"{field_label(field)}: {display_value(from_value)} {ARROW} {display_value(to_value)}"


@dataclass
class AuditDiff:
    """Result of diffing an update against a ticket"""
    ticket: Ticket
    changed: Dict[str, Any]
    entries: List[AuditEntry]

    @property
    def has_changes(self) -> bool:
        return bool(self.entries)


def compute_diff(
    ticket: Ticket,
    update: Mapping[str, Any],
    actor: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AuditDiff:
    """Diff `update` against `ticket`.

    Returns a new Ticket with changed fields applied and the new entries
    appended to its audit log; the input ticket is left untouched. When
    nothing differs the returned ticket equals the input and no entries are
    produced. All entries from one call share `now` and `actor`.
    """
    unknown = [name for name in update if name not in ALLOWED_FIELDS]
    if unknown:
        raise ValidationError(
            f"Fields not allowed in update: {', '.join(sorted(unknown))}",
            issues={name: ["Field cannot be updated"] for name in unknown},
        )

    actor = actor or UNKNOWN_ACTOR
    now = now or datetime.utcnow()
    changed: Dict[str, Any] = {}
    entries: List[AuditEntry] = []

    for name in TRACKED_FIELDS:
        if name not in update:
            continue
        current = getattr(ticket, name)
        proposed = update[name]
        if proposed == current:
            continue
        changed[name] = proposed
        entries.append(
            AuditEntry(
                at=now,
                by=actor,
                action="update",
                field=name,
                from_value=raw_value(current),
                to_value=raw_value(proposed),
                changes=[describe_change(name, current, proposed)],
            )
        )

    if ARCHIVE_FIELD in update and bool(update[ARCHIVE_FIELD]) != ticket.archived:
        archived = bool(update[ARCHIVE_FIELD])
        changed[ARCHIVE_FIELD] = archived
        entries.append(
            AuditEntry(
                at=now,
                by=actor,
                action="archive" if archived else "unarchive",
                field=ARCHIVE_FIELD,
                from_value=ticket.archived,
                to_value=archived,
                changes=[describe_change(ARCHIVE_FIELD, ticket.archived, archived)],
            )
        )

    if not entries:
        return AuditDiff(ticket=ticket, changed={}, entries=[])

    field_updates = {name: value for name, value in changed.items() if name != ARCHIVE_FIELD}
    merged = dataclasses.replace(ticket, audit=list(ticket.audit) + entries, **field_updates)
    if ARCHIVE_FIELD in changed:
        merged.archived = changed[ARCHIVE_FIELD]
        merged.archived_at = now if merged.archived else None
        merged.archived_by = actor if merged.archived else None
    merged.touch(now)
    return AuditDiff(ticket=merged, changed=changed, entries=entries)
