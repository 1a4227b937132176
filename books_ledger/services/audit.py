"""
Audit trail of ledger events.

Services call record_event() inside the same session as the
change they describe, so the event commits or rolls back with it.
"""

import json

from sqlalchemy.orm import Session

from books_ledger.models.audit_log import AuditLog


def record_event(
    db: Session,
    event_type: str,
    details: dict,
    actor: str | None = None,
) -> AuditLog:
    entry = AuditLog(
        event_type=event_type,
        actor=actor,
        details=json.dumps(details, default=str, sort_keys=True),
    )
    db.add(entry)
    return entry
