"""Import sessions: the server-side state of one import dialog.

A session is created when a file is uploaded, validated once, and then
either confirmed (submitted as one batch) or discarded. Sessions are kept in
memory only and expire after a fixed time to live.
"""

import asyncio
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from school_admin.core.logging import get_logger
from school_admin.schemas.imports import (
    ImportErrorOut,
    ImportOutcome,
    ImportPreview,
    ImportSessionState,
)
from school_admin.services.importer.column_schema import ImportKindDefinition
from school_admin.services.importer.csv_parser import CSVParseError, CSVParser
from school_admin.services.importer.preview import build_preview
from school_admin.services.importer.submitter import BatchTransportError
from school_admin.services.importer.validators import RowValidator, ValidationError

logger = get_logger(__name__)

BatchSender = Callable[[list[dict[str, Any]]], Awaitable[ImportOutcome]]


class ImportSessionNotFoundError(Exception):
    """No live session with that id."""


class SubmissionInProgressError(Exception):
    """A submission for this session has not finished yet."""


class NothingToSubmitError(Exception):
    """The session holds no validated rows."""


class ImportLimitExceededError(Exception):
    """The file has more data rows than allowed."""

    def __init__(self, row_count: int, max_rows: int):
        super().__init__(f"File has {row_count} data rows; at most {max_rows} are allowed")
        self.row_count = row_count
        self.max_rows = max_rows


@dataclass(frozen=True)
class ImportLimits:
    """Size limits applied when loading a file."""

    max_rows: int = 5000
    preview_columns: int = 5
    preview_rows: int = 10


class ImportSession:
    """State of one import dialog."""

    def __init__(
        self,
        kind: ImportKindDefinition,
        ttl: timedelta,
        exam_id: str | None = None,
        now: datetime | None = None,
    ):
        self.id = str(uuid.uuid4())
        self.kind = kind
        self.exam_id = exam_id
        self.state = ImportSessionState.EMPTY
        self.file_name: str | None = None
        self.rows: list[dict[str, str]] = []
        self.preview: ImportPreview | None = None
        self.errors: list[ValidationError] = []
        self.outcome: ImportOutcome | None = None
        self.message: str | None = None
        self.created_at = now or datetime.now(UTC)
        self.expires_at = self.created_at + ttl
        self._lock = asyncio.Lock()

    @property
    def submitting(self) -> bool:
        return self._lock.locked()

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at

    def load(
        self,
        content: bytes | str,
        file_name: str | None = None,
        limits: ImportLimits | None = None,
        parser: CSVParser | None = None,
        validator: RowValidator | None = None,
    ) -> ImportSessionState:
        """
        Parse and validate an uploaded file, replacing whatever was loaded before.

        Returns:
            READY with a preview, or INVALID with the error list

        Raises:
            SubmissionInProgressError: If a submission is in flight
            ImportLimitExceededError: If the file exceeds ``limits.max_rows``
        """
        if self.submitting:
            raise SubmissionInProgressError("Import is already being submitted")

        limits = limits or ImportLimits()
        parser = parser or CSVParser()
        validator = validator or RowValidator()

        self.file_name = file_name
        self.rows = []
        self.preview = None
        self.errors = []
        self.outcome = None
        self.message = None

        try:
            table = parser.parse(content)
        except CSVParseError as e:
            return self._reject([ValidationError(f"CSV parse error: {e}")])

        if len(table.rows) > limits.max_rows:
            self.state = ImportSessionState.EMPTY
            raise ImportLimitExceededError(len(table.rows), limits.max_rows)

        rows, errors = validator.validate(
            self.kind.schema, table.headers, table.rows, question_rules=self.kind.question_rules
        )
        if errors:
            return self._reject(errors)

        self.rows = rows
        self.preview = build_preview(
            self.kind.schema,
            rows,
            max_columns=limits.preview_columns,
            max_rows=limits.preview_rows,
        )
        self.state = ImportSessionState.READY
        logger.info(
            "Import file parsed",
            extra={"session_id": self.id, "kind": self.kind.kind.value, "rows": len(rows)},
        )
        return self.state

    def _reject(self, errors: list[ValidationError]) -> ImportSessionState:
        self.errors = errors
        self.state = ImportSessionState.INVALID
        logger.info(
            "Import file rejected",
            extra={"session_id": self.id, "kind": self.kind.kind.value, "errors": len(errors)},
        )
        return self.state

    def payload(self) -> list[dict[str, Any]]:
        """Validated rows shaped for the backend."""
        return self.kind.shape_rows(self.rows)

    async def submit(self, send: BatchSender) -> ImportOutcome:
        """
        Send the validated rows once through ``send``.

        Full success closes the session. Partial failure keeps it open in the
        FAILED state with the backend's errors and no preview; the rows are
        dropped so nothing can be sent twice. A transport failure leaves the
        rows in place with a blocking message and re-raises, unless the
        backend may already have applied the batch: then the session moves to
        FAILED without its rows before the error is re-raised.

        Raises:
            SubmissionInProgressError: If another submission is in flight
            NothingToSubmitError: If there are no validated rows
            BatchTransportError: If the batch did not go through
        """
        if self.submitting:
            raise SubmissionInProgressError("Import is already being submitted")
        if self.state != ImportSessionState.READY or not self.rows:
            raise NothingToSubmitError("There are no validated rows to import")

        async with self._lock:
            self.message = None
            try:
                outcome = await send(self.payload())
            except BatchTransportError as e:
                self.message = e.message
                if e.applied:
                    self.rows = []
                    self.preview = None
                    self.state = ImportSessionState.FAILED
                    logger.error(
                        "Import batch reached the backend without a usable outcome",
                        extra={"session_id": self.id, "kind": self.kind.kind.value, "error": e.message},
                    )
                raise

            self.outcome = outcome
            self.rows = []
            self.preview = None
            if outcome.failure_count > 0:
                self.state = ImportSessionState.FAILED
                self.message = outcome.summary
            else:
                self.state = ImportSessionState.CLOSED
                self.message = f"{outcome.success_count} imported"

        logger.info(
            "Import session submitted",
            extra={
                "session_id": self.id,
                "kind": self.kind.kind.value,
                "state": self.state.value,
                "success_count": outcome.success_count,
                "failure_count": outcome.failure_count,
            },
        )
        return outcome

    def error_list(self) -> list[ImportErrorOut]:
        return [ImportErrorOut(**e.to_dict()) for e in self.errors]


class ImportSessionStore:
    """In-memory sessions keyed by id, dropped once their time to live passes."""

    def __init__(self, ttl_seconds: int = 1800, clock: Callable[[], datetime] | None = None):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock or (lambda: datetime.now(UTC))
        self._sessions: dict[str, ImportSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, kind: ImportKindDefinition, exam_id: str | None = None) -> ImportSession:
        self.purge_expired()
        session = ImportSession(kind, self.ttl, exam_id=exam_id, now=self.clock())
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> ImportSession:
        """Return a live session or raise ``ImportSessionNotFoundError``."""
        session = self._sessions.get(session_id)
        if session is None or session.is_expired(self.clock()):
            self._sessions.pop(session_id, None)
            raise ImportSessionNotFoundError(f"Import session {session_id} not found")
        return session

    def discard(self, session_id: str) -> None:
        """Forget a session; an in-flight submission still runs to completion."""
        if self._sessions.pop(session_id, None) is None:
            raise ImportSessionNotFoundError(f"Import session {session_id} not found")

    def purge_expired(self) -> int:
        now = self.clock()
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now) and not s.submitting]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)
