"""Forward a validated batch to the school backend."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from school_admin.clients.backend_api import BackendAPIError
from school_admin.core.logging import get_logger
from school_admin.schemas.imports import ImportOutcome

logger = get_logger(__name__)

DEFAULT_TRANSPORT_MESSAGE = "Import failed"

Acceptor = Callable[[list[dict[str, Any]]], Awaitable[ImportOutcome]]


class BatchTransportError(Exception):
    """The batch did not produce a usable outcome.

    ``applied`` is False when the batch never reached the backend or was
    refused as a whole, so sending it again is safe. It is True when the
    backend answered with results that cannot be trusted; the batch may have
    been written and must not be sent again.
    """

    def __init__(self, message: str, status_code: int | None = None, applied: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.applied = applied


class BatchSubmitter:
    """Send all rows of one import in a single call; never retries."""

    def __init__(self, acceptor: Acceptor, label: str = "import"):
        """
        Initialize submitter.

        Args:
            acceptor: Coroutine function taking the whole payload list
            label: Name used in log records (import kind)
        """
        self.acceptor = acceptor
        self.label = label

    async def submit(self, rows: Sequence[dict[str, Any]]) -> ImportOutcome:
        """
        Submit ``rows`` as one batch.

        Returns:
            The backend's outcome; a non-zero failure count is a normal result

        Raises:
            BatchTransportError: On transport failure, rejection of the whole
                batch, or an outcome whose counts do not match the rows sent
        """
        payload = list(rows)
        try:
            outcome = await self.acceptor(payload)
        except BackendAPIError as e:
            logger.warning(
                "Batch rejected by backend",
                extra={"kind": self.label, "rows": len(payload), "status_code": e.status_code},
            )
            raise BatchTransportError(e.message or DEFAULT_TRANSPORT_MESSAGE, e.status_code) from e

        if outcome.success_count + outcome.failure_count != len(payload):
            logger.error(
                "Batch outcome counts do not match rows sent",
                extra={
                    "kind": self.label,
                    "rows": len(payload),
                    "success_count": outcome.success_count,
                    "failure_count": outcome.failure_count,
                },
            )
            raise BatchTransportError(
                f"Backend reported {outcome.success_count + outcome.failure_count} results "
                f"for {len(payload)} rows",
                applied=True,
            )

        logger.info(
            "Batch submitted",
            extra={
                "kind": self.label,
                "rows": len(payload),
                "success_count": outcome.success_count,
                "failure_count": outcome.failure_count,
            },
        )
        return outcome
