"""Audit logging helpers."""

from typing import Any

from fastapi import Request
from sqlalchemy.orm import Session

from school_admin.core.errors import get_request_id
from school_admin.models.audit import AuditLog


def write_audit(
    db: Session,
    actor_user_id: str,
    action: str,
    entity_type: str,
    entity_id: str,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
    meta: dict[str, Any] | None = None,
    request: Request | None = None,
) -> AuditLog:
    """
    Write an audit log entry.

    The entry is added to ``db``; committing is up to the caller.

    Args:
        db: Database session
        actor_user_id: Backend user ID performing the action
        action: Action type (e.g., "import.submit")
        entity_type: Type of entity (e.g., "IMPORT_SESSION")
        entity_id: ID of the entity
        before: State before change
        after: State after change
        meta: Additional metadata
        request: FastAPI request (for request_id)
    """
    audit_meta = meta.copy() if meta else {}
    if request:
        audit_meta["request_id"] = get_request_id(request)

    audit_entry = AuditLog(
        actor_user_id=actor_user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        before=before,
        after=after,
        meta=audit_meta,
    )
    db.add(audit_entry)
    return audit_entry
