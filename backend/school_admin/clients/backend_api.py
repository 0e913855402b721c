"""Client for the school-management REST backend.

Every response is wrapped as ``{"data": ...}``; failures carry a ``message``.
One ``httpx.AsyncClient`` is shared by the application; a ``BackendAPIClient``
binds it to the caller's ``Authorization`` header for one request.
"""

from typing import Any

import httpx

from school_admin.core.config import AppConfig, Settings
from school_admin.core.logging import get_logger
from school_admin.schemas.auth import Actor
from school_admin.schemas.exam_questions import Exam, Question, QuestionDraft
from school_admin.schemas.imports import ImportOutcome

logger = get_logger(__name__)


class BackendAPIError(Exception):
    """Backend call failed; ``status_code`` is 502 when it never answered."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def build_http_client(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create the shared HTTP client for the configured backend."""
    return httpx.AsyncClient(
        base_url=settings.backend_base_url,
        timeout=settings.BACKEND_API_TIMEOUT_SECONDS,
        headers={"Accept": "application/json"},
        transport=transport,
    )


class BackendAPIClient:
    """Typed calls the console makes against the school backend."""

    def __init__(self, http: httpx.AsyncClient, authorization: str | None = None):
        self.http = http
        self.headers = {"Authorization": authorization} if authorization else {}

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self.http.request(method, path, json=json, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(
                "Backend request failed",
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise BackendAPIError(502, f"Backend unavailable: {e}") from e

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None

        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            if isinstance(message, list):
                message = "; ".join(str(m) for m in message)
            logger.warning(
                "Backend returned error",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise BackendAPIError(response.status_code, message or response.reason_phrase or "Request failed")

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    # ============================================================================
    # Session and configuration
    # ============================================================================

    async def get_current_actor(self) -> Actor:
        return Actor.model_validate(await self._request("GET", "/auth/me"))

    async def get_app_config(self) -> AppConfig:
        data = await self._request("GET", "/config") or {}
        return AppConfig.model_validate(data.get("settings") or {})

    # ============================================================================
    # Bulk import
    # ============================================================================

    async def bulk_import(self, endpoint: str, payload_key: str, rows: list[dict[str, Any]]) -> ImportOutcome:
        """POST all rows in one call and return the backend's counts."""
        data = await self._request("POST", endpoint, json={payload_key: rows})
        return ImportOutcome.model_validate(data)

    # ============================================================================
    # Exams and questions
    # ============================================================================

    async def get_exam(self, exam_id: str) -> Exam:
        return Exam.model_validate(await self._request("GET", f"/exams/{exam_id}"))

    async def list_questions(self, exam_id: str) -> list[Question]:
        data = await self._request("GET", f"/exams/{exam_id}/questions") or []
        return [Question.model_validate(item) for item in data]

    async def create_question(self, exam_id: str, draft: QuestionDraft) -> Question:
        data = await self._request("POST", f"/exams/{exam_id}/questions", json=_dump(draft))
        return Question.model_validate(data)

    async def update_question(self, exam_id: str, question_id: str, draft: QuestionDraft) -> Question:
        data = await self._request(
            "PATCH", f"/exams/{exam_id}/questions/{question_id}", json=_dump(draft)
        )
        return Question.model_validate(data)

    async def delete_question(self, exam_id: str, question_id: str) -> None:
        await self._request("DELETE", f"/exams/{exam_id}/questions/{question_id}")

    async def bulk_create_questions(self, exam_id: str, rows: list[dict[str, Any]]) -> ImportOutcome:
        return await self.bulk_import(f"/exams/{exam_id}/questions/bulk", "questions", rows)

    async def publish_exam(self, exam_id: str) -> None:
        await self._request("POST", f"/exams/{exam_id}/publish")


def _dump(draft: QuestionDraft) -> dict[str, Any]:
    return draft.model_dump(by_alias=True, exclude_none=True, mode="json")
