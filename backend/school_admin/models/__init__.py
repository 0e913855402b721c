"""Database models."""

from school_admin.models.audit import AuditLog

__all__ = ["AuditLog"]
