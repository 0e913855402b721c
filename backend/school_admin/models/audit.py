"""Audit log model."""

import uuid

from sqlalchemy import JSON, Column, DateTime, Index, String, func

from school_admin.db.base import Base


class AuditLog(Base):
    """Audit log for console actions that change backend data."""

    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    actor_user_id = Column(String(64), nullable=False)  # backend user _id
    action = Column(String(100), nullable=False)  # e.g., "import.submit", "exam.publish"
    entity_type = Column(String(50), nullable=False)  # e.g., "IMPORT_SESSION", "QUESTION"
    entity_id = Column(String(64), nullable=False)
    before = Column(JSON, nullable=True)  # State before change
    after = Column(JSON, nullable=True)  # State after change
    meta = Column(JSON, nullable=True)  # request-id, counts, etc.
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_audit_log_entity_type", "entity_type"),
        Index("ix_audit_log_entity_id", "entity_id"),
        Index("ix_audit_log_created_at", "created_at"),
        Index("ix_audit_log_actor_user_id", "actor_user_id"),
    )
