"""Pydantic schemas for bulk import sessions."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from school_admin.schemas.base import CamelModel


class ImportSessionState(str, Enum):
    """Where an import session stands."""

    EMPTY = "empty"
    READY = "ready"
    INVALID = "invalid"
    CLOSED = "closed"
    FAILED = "failed"


class ColumnOut(BaseModel):
    """One expected column."""

    key: str
    label: str
    required: bool


class ImportSchemaOut(BaseModel):
    """Column schema of an import kind."""

    kind: str
    title: str
    columns: list[ColumnOut]
    required_keys: list[str]
    optional_keys: list[str]
    template_filename: str


class ImportPreview(BaseModel):
    """Bounded view of validated rows shown before confirming an import."""

    total_rows: int
    columns: list[str]
    omitted_columns: int = 0
    rows: list[dict[str, str]]
    omitted_rows: int = 0


class ImportErrorOut(BaseModel):
    """A validation error; ``row_number`` is null for file-level errors."""

    row_number: int | None = None
    message: str


class ImportOutcome(CamelModel):
    """Counts reported by the school backend for one batch."""

    success_count: int = Field(..., ge=0)
    failure_count: int = Field(..., ge=0)
    errors: list[str] = Field(default_factory=list)

    @property
    def summary(self) -> str:
        """Partial failure text as shown in the import dialog."""
        lines = [f"{self.success_count} imported, {self.failure_count} failed."]
        lines.extend(self.errors)
        return "\n".join(lines)


class ImportSessionOut(BaseModel):
    """Import dialog state returned to the console."""

    id: str
    kind: str
    exam_id: str | None = None
    state: ImportSessionState
    status_badge: str
    file_name: str | None = None
    preview: ImportPreview | None = None
    errors: list[ImportErrorOut] = Field(default_factory=list)
    outcome: ImportOutcome | None = None
    message: str | None = None
    submitting: bool = False
    created_at: datetime
    expires_at: datetime
