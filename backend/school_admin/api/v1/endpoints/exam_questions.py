"""Question builder endpoints for one exam."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from school_admin.api.v1.domain_errors import domain_errors
from school_admin.clients.backend_api import BackendAPIClient
from school_admin.common.badges import exam_state_badge
from school_admin.core.audit import write_audit
from school_admin.core.dependencies import get_backend_client, require_action
from school_admin.core.permissions import ConsoleAction
from school_admin.db.session import get_db
from school_admin.schemas.auth import Actor
from school_admin.schemas.exam_questions import ExamQuestionsOut, Question, QuestionDraft
from school_admin.services.exams.workspace import ExamWorkspace

router = APIRouter(prefix="/exams", tags=["Exam Questions"])


def _audit_payload(question: Question) -> dict:
    return question.model_dump(by_alias=True, exclude_none=True, mode="json")


def _workspace_out(workspace: ExamWorkspace) -> ExamQuestionsOut:
    return ExamQuestionsOut(
        exam=workspace.exam,
        questions=workspace.questions,
        total_points=workspace.total_points,
        remaining_points=workspace.remaining_points,
        status_badge=exam_state_badge(workspace.exam.state).value,
    )


@router.get("/{exam_id}/questions", response_model=ExamQuestionsOut)
async def list_questions(
    exam_id: str,
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(require_action(ConsoleAction.VIEW_QUESTIONS)),
) -> ExamQuestionsOut:
    """Exam, its questions and the running points total."""
    with domain_errors():
        workspace = await ExamWorkspace.load(client, exam_id)
    return _workspace_out(workspace)


@router.post("/{exam_id}/questions", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(
    exam_id: str,
    draft: QuestionDraft,
    request: Request,
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(require_action(ConsoleAction.EDIT_QUESTIONS)),
    db: Session = Depends(get_db),
) -> Question:
    """Add a question; refused when the exam is published or the points do not fit."""
    with domain_errors():
        workspace = await ExamWorkspace.load(client, exam_id)
        question = await workspace.create_question(draft)

    write_audit(
        db,
        actor_user_id=actor.id,
        action="question.create",
        entity_type="QUESTION",
        entity_id=question.id,
        after=_audit_payload(question),
        meta={"exam_id": exam_id, "total_points": workspace.total_points},
        request=request,
    )
    db.commit()
    return question


@router.patch("/{exam_id}/questions/{question_id}", response_model=Question)
async def update_question(
    exam_id: str,
    question_id: str,
    draft: QuestionDraft,
    request: Request,
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(require_action(ConsoleAction.EDIT_QUESTIONS)),
    db: Session = Depends(get_db),
) -> Question:
    """Replace a question; its old points do not count against the new ones."""
    with domain_errors():
        workspace = await ExamWorkspace.load(client, exam_id)
        before = next((q for q in workspace.questions if q.id == question_id), None)
        question = await workspace.update_question(question_id, draft)

    write_audit(
        db,
        actor_user_id=actor.id,
        action="question.update",
        entity_type="QUESTION",
        entity_id=question_id,
        before=_audit_payload(before) if before else None,
        after=_audit_payload(question),
        meta={"exam_id": exam_id, "total_points": workspace.total_points},
        request=request,
    )
    db.commit()
    return question


@router.delete("/{exam_id}/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    exam_id: str,
    question_id: str,
    request: Request,
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(require_action(ConsoleAction.EDIT_QUESTIONS)),
    db: Session = Depends(get_db),
) -> Response:
    with domain_errors():
        workspace = await ExamWorkspace.load(client, exam_id)
        removed = await workspace.delete_question(question_id)

    write_audit(
        db,
        actor_user_id=actor.id,
        action="question.delete",
        entity_type="QUESTION",
        entity_id=question_id,
        before=_audit_payload(removed),
        meta={"exam_id": exam_id, "total_points": workspace.total_points},
        request=request,
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{exam_id}/publish", response_model=ExamQuestionsOut)
async def publish_exam(
    exam_id: str,
    request: Request,
    client: BackendAPIClient = Depends(get_backend_client),
    actor: Actor = Depends(require_action(ConsoleAction.PUBLISH_EXAM)),
    db: Session = Depends(get_db),
) -> ExamQuestionsOut:
    """Publish the exam. Its questions are locked from then on."""
    with domain_errors():
        workspace = await ExamWorkspace.load(client, exam_id)
        await workspace.publish()

    write_audit(
        db,
        actor_user_id=actor.id,
        action="exam.publish",
        entity_type="EXAM",
        entity_id=exam_id,
        before={"published": False},
        after={"published": True},
        meta={"questions": len(workspace.questions), "total_points": workspace.total_points},
        request=request,
    )
    db.commit()
    return _workspace_out(workspace)
