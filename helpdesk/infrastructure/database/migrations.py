"""Ticket schema migrations

Version 1 tickets kept their change log under `history`, and older entries
carry only a single `change` string or bare field/from/to values. The
migration runs once per row when the database initialises: it moves the
log into `audit`, gives every entry display text, and bumps the row to the
current schema version. Afterwards only the canonical log is read.
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from helpdesk.domain.services.audit_diff import describe_change
from helpdesk.infrastructure.database.models import TICKET_SCHEMA_VERSION, TicketModel

LEGACY_ACTOR = "System"


def _iso(value: Any, fallback: Optional[datetime]) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None).isoformat()
        except ValueError:
            pass
    return (fallback or datetime.utcnow()).isoformat()


def upgrade_audit_entries(entries: Iterable[Any], fallback_at: Optional[datetime] = None) -> List[dict]:
    """Rewrite stored audit entries into the canonical shape."""
    upgraded = []
    for raw in entries or []:
        if not isinstance(raw, dict):
            continue
        changes = [str(c) for c in raw.get("changes") or [] if c]
        if not changes and raw.get("change"):
            changes = [str(raw["change"])]
        if not changes and raw.get("field"):
            changes = [describe_change(raw["field"], raw.get("from"), raw.get("to"))]
        if not changes:
            changes = ["Updated ticket"]
        upgraded.append({
            "at": _iso(raw.get("at"), fallback_at),
            "by": raw.get("by") or LEGACY_ACTOR,
            "action": raw.get("action") or "update",
            "field": raw.get("field"),
            "from": raw.get("from"),
            "to": raw.get("to"),
            "changes": changes,
        })
    return upgraded


def ensure_ticket_columns(engine: Engine) -> None:
    """Add audit columns missing from a tickets table created by an older release."""
    inspector = inspect(engine)
    if "tickets" not in inspector.get_table_names():
        return
    columns = {col["name"] for col in inspector.get_columns("tickets")}
    statements = []
    if "audit" not in columns:
        statements.append("ALTER TABLE tickets ADD COLUMN audit JSON")
    if "history" not in columns:
        statements.append("ALTER TABLE tickets ADD COLUMN history JSON")
    if "schema_version" not in columns:
        # existing rows predate versioning
        statements.append("ALTER TABLE tickets ADD COLUMN schema_version INTEGER NOT NULL DEFAULT 1")
    if not statements:
        return
    with engine.begin() as conn:
        for statement in statements:
            conn.execute(text(statement))
    print(f"✅ Auto-migrated: added {len(statements)} column(s) to tickets table")


def migrate_legacy_audit(db: Session) -> int:
    """Move legacy history into the canonical audit log. Returns rows migrated."""
    ensure_ticket_columns(db.get_bind())
    rows = (
        db.query(TicketModel)
        .filter(TicketModel.schema_version < TICKET_SCHEMA_VERSION)
        .all()
    )
    for row in rows:
        source = row.audit if row.audit else (row.history or [])
        row.audit = upgrade_audit_entries(source, fallback_at=row.updated_at or row.created_at)
        row.history = None
        row.schema_version = TICKET_SCHEMA_VERSION
    if rows:
        db.commit()
    return len(rows)
