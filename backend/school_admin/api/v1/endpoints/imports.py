"""Bulk import endpoints: schemas, templates and import sessions."""

from functools import partial
from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from school_admin.api.v1.domain_errors import domain_errors
from school_admin.clients.backend_api import BackendAPIClient
from school_admin.common.badges import import_session_badge
from school_admin.core.app_exceptions import forbidden, not_found, unprocessable
from school_admin.core.audit import write_audit
from school_admin.core.config import Settings, get_settings
from school_admin.core.dependencies import get_backend_client, get_current_actor, get_import_store
from school_admin.core.etag import check_if_none_match, compute_etag, create_not_modified_response
from school_admin.core.logging import get_logger
from school_admin.core.permissions import is_allowed
from school_admin.db.session import get_db
from school_admin.schemas.auth import Actor
from school_admin.schemas.imports import ColumnOut, ImportSchemaOut, ImportSessionOut, ImportSessionState
from school_admin.services.exams.workspace import ExamWorkspace
from school_admin.services.importer import (
    BatchSubmitter,
    ImportKind,
    ImportKindDefinition,
    ImportLimits,
    ImportSession,
    ImportSessionStore,
    generate_template,
    get_import_kind,
)
from school_admin.services.importer.template import TEMPLATE_MEDIA_TYPE

logger = get_logger(__name__)

router = APIRouter(prefix="/imports", tags=["Imports"])


def _resolve_kind(kind: str) -> ImportKindDefinition:
    try:
        return get_import_kind(kind)
    except ValueError:
        raise not_found("UNKNOWN_IMPORT_KIND", f"Unknown import kind: {kind}") from None


def _ensure_allowed(actor: Actor, definition: ImportKindDefinition) -> None:
    if not is_allowed(actor.capabilities, definition.action):
        raise forbidden(f"Access denied. Missing permission for {definition.action.value}")


def _session_out(session: ImportSession) -> ImportSessionOut:
    return ImportSessionOut(
        id=session.id,
        kind=session.kind.kind.value,
        exam_id=session.exam_id,
        state=session.state,
        status_badge=import_session_badge(session.state).value,
        file_name=session.file_name,
        preview=session.preview,
        errors=session.error_list(),
        outcome=session.outcome,
        message=session.message,
        submitting=session.submitting,
        created_at=session.created_at,
        expires_at=session.expires_at,
    )


# ============================================================================
# Import Session Endpoints
# ============================================================================


@router.get("/sessions/{session_id}", response_model=ImportSessionOut)
async def get_session(
    session_id: str,
    store: ImportSessionStore = Depends(get_import_store),
    actor: Actor = Depends(get_current_actor),
) -> ImportSessionOut:
    """Current state of an import dialog."""
    with domain_errors():
        session = store.get(session_id)
    _ensure_allowed(actor, session.kind)
    return _session_out(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_session(
    session_id: str,
    store: ImportSessionStore = Depends(get_import_store),
    actor: Actor = Depends(get_current_actor),
) -> Response:
    """Close the dialog. A submission already in flight is not retracted."""
    with domain_errors():
        session = store.get(session_id)
        _ensure_allowed(actor, session.kind)
        store.discard(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/sessions/{session_id}/submit", response_model=ImportSessionOut)
async def submit_session(
    session_id: str,
    request: Request,
    store: ImportSessionStore = Depends(get_import_store),
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> ImportSessionOut:
    """
    Send the validated rows as one batch.

    A partial failure is reported with 200 and the session in the ``failed``
    state; only transport failures and guard violations are error responses.
    """
    with domain_errors():
        session = store.get(session_id)
        _ensure_allowed(actor, session.kind)

        definition = session.kind
        if definition.kind == ImportKind.QUESTIONS:
            workspace = await ExamWorkspace.load(client, session.exam_id)
            send = workspace.import_questions
        else:
            acceptor = partial(client.bulk_import, definition.endpoint, definition.payload_key)
            send = BatchSubmitter(acceptor, label=definition.kind.value).submit

        row_count = len(session.rows)
        outcome = await session.submit(send)

    write_audit(
        db,
        actor_user_id=actor.id,
        action="import.submit",
        entity_type="IMPORT_SESSION",
        entity_id=session.id,
        after={"state": session.state.value},
        meta={
            "kind": definition.kind.value,
            "exam_id": session.exam_id,
            "rows": row_count,
            "success_count": outcome.success_count,
            "failure_count": outcome.failure_count,
        },
        request=request,
    )
    db.commit()

    return _session_out(session)


# ============================================================================
# Import Kind Endpoints
# ============================================================================


@router.get("/{kind}/schema", response_model=ImportSchemaOut)
async def get_schema(kind: str) -> ImportSchemaOut:
    """Expected columns of an import kind."""
    definition = _resolve_kind(kind)
    return ImportSchemaOut(
        kind=definition.kind.value,
        title=definition.title,
        columns=[ColumnOut(key=c.key, label=c.label, required=c.required) for c in definition.schema],
        required_keys=definition.schema.required_keys(),
        optional_keys=definition.schema.optional_keys(),
        template_filename=definition.template_filename,
    )


@router.get("/{kind}/template")
async def download_template(kind: str, request: Request) -> Response:
    """Download CSV template for an import kind. Supports ETag/If-None-Match for caching."""
    definition = _resolve_kind(kind)
    csv_content = generate_template(definition.schema, definition.template_rows)

    etag = compute_etag(csv_content)
    if check_if_none_match(request, etag):
        return create_not_modified_response(etag)

    return Response(
        content=csv_content,
        media_type=TEMPLATE_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{definition.template_filename}"',
            "ETag": etag,
        },
    )


@router.post(
    "/{kind}/sessions",
    response_model=ImportSessionOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    kind: str,
    file: UploadFile = File(...),
    exam_id: Annotated[str | None, Form()] = None,
    settings: Settings = Depends(get_settings),
    store: ImportSessionStore = Depends(get_import_store),
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(get_current_actor),
) -> ImportSessionOut:
    """
    Upload a CSV file, validate it and open an import session with a preview.

    Invalid files are rejected with the complete error list and no session is
    kept. Question imports need ``exam_id`` and are refused for published exams
    before the file is read.
    """
    definition = _resolve_kind(kind)
    _ensure_allowed(actor, definition)

    if definition.kind == ImportKind.QUESTIONS:
        if not exam_id:
            raise unprocessable("VALIDATION_ERROR", "exam_id is required for question imports")
        with domain_errors():
            workspace = await ExamWorkspace.load(client, exam_id)
            workspace.guard.ensure_mutable(workspace.exam)
    else:
        exam_id = None

    max_bytes = settings.MAX_BODY_BYTES_IMPORT
    file.file.seek(0, 2)
    file_size = file.file.tell()
    file.file.seek(0)

    if file_size > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "code": "PAYLOAD_TOO_LARGE",
                "message": "File too large",
                "details": {"limit": max_bytes},
            },
        )

    file_content = await file.read()
    limits = ImportLimits(
        max_rows=settings.IMPORT_MAX_ROWS,
        preview_columns=settings.IMPORT_PREVIEW_MAX_COLUMNS,
        preview_rows=settings.IMPORT_PREVIEW_MAX_ROWS,
    )

    session = store.create(definition, exam_id=exam_id)
    try:
        with domain_errors():
            state = session.load(file_content, file_name=file.filename, limits=limits)
    except HTTPException:
        store.discard(session.id)
        raise

    if state == ImportSessionState.INVALID:
        store.discard(session.id)
        errors = session.error_list()
        if len(errors) == 1 and errors[0].row_number is None:
            raise unprocessable("IMPORT_SCHEMA_ERROR", errors[0].message)
        raise unprocessable(
            "IMPORT_ROW_ERRORS",
            f"{len(errors)} row(s) failed validation",
            [e.model_dump() for e in errors],
        )

    return _session_out(session)
