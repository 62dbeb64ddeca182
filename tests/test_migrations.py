from datetime import datetime

from helpdesk.infrastructure.database.base import Database
from helpdesk.infrastructure.database.migrations import migrate_legacy_audit, upgrade_audit_entries
from helpdesk.infrastructure.database.models import TICKET_SCHEMA_VERSION, TicketModel

UPDATED = datetime(2023, 6, 1, 12, 0, 0)

LEGACY_HISTORY = [
    {"at": "2023-05-01T08:00:00Z", "by": "admin@example.com", "change": "Status: Open → Closed"},
    {"at": "2023-05-02T09:00:00", "field": "priority", "from": "Low", "to": "High"},
    {"by": "sam@example.com"},
    "garbage",
]


def legacy_ticket(**overrides) -> TicketModel:
    values = dict(
        title="Old ticket",
        description="Filed before the audit log existed",
        reporter_name="Dana",
        reporter_email="dana@example.com",
        audit=[],
        history=LEGACY_HISTORY,
        schema_version=1,
        created_at=UPDATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return TicketModel(**values)


def test_upgrade_audit_entries_fills_display_text():
    entries = upgrade_audit_entries(LEGACY_HISTORY, fallback_at=UPDATED)

    assert [e["changes"] for e in entries] == [
        ["Status: Open → Closed"],
        ["Priority: Low → High"],
        ["Updated ticket"],
    ]
    assert entries[0]["at"] == "2023-05-01T08:00:00"
    assert entries[1]["by"] == "System"
    assert entries[2]["at"] == UPDATED.isoformat()


def test_migration_moves_history_into_audit(session):
    session.add(legacy_ticket(id="legacy-1"))
    session.add(legacy_ticket(id="legacy-2", audit=[{"by": "x", "changes": ["Kept"]}]))
    session.commit()

    assert migrate_legacy_audit(session) == 2

    first = session.get(TicketModel, "legacy-1")
    assert first.history is None
    assert first.schema_version == TICKET_SCHEMA_VERSION
    assert len(first.audit) == 3

    second = session.get(TicketModel, "legacy-2")
    assert [e["changes"] for e in second.audit] == [["Kept"]]

    assert migrate_legacy_audit(session) == 0


def test_migration_runs_when_database_initialises(tmp_path):
    url = f"sqlite:///{tmp_path / 'legacy.db'}"
    db = Database(url).init()
    with db.session_scope() as session:
        session.add(legacy_ticket(id="legacy-1"))
        session.commit()
    db.dispose()

    db = Database(url).init()
    with db.session_scope() as session:
        ticket = session.get(TicketModel, "legacy-1")
        assert ticket.schema_version == TICKET_SCHEMA_VERSION
        assert ticket.audit[0]["changes"] == ["Status: Open → Closed"]
    db.dispose()
