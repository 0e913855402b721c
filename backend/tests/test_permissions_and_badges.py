"""Tests for the capability table and status badges."""

import pytest

from school_admin.common.badges import BadgeVariant, exam_state_badge, import_session_badge
from school_admin.core.permissions import (
    ACTION_CAPABILITIES,
    Capability,
    ConsoleAction,
    is_allowed,
    parse_capabilities,
)
from school_admin.schemas.auth import Actor
from school_admin.schemas.exam_questions import ExamState
from school_admin.schemas.imports import ImportSessionState


def test_every_action_has_a_capability():
    assert set(ACTION_CAPABILITIES) == set(ConsoleAction)


def test_unknown_permission_strings_are_ignored():
    capabilities = parse_capabilities(["write_parents", "manage_fees", "read_exams"])

    assert capabilities == frozenset({Capability.WRITE_PARENTS, Capability.READ_EXAMS})


@pytest.mark.parametrize(
    ("permissions", "action", "allowed"),
    [
        (["write_parents"], ConsoleAction.IMPORT_PARENTS, True),
        (["read_parents"], ConsoleAction.IMPORT_PARENTS, False),
        (["read_exams"], ConsoleAction.VIEW_QUESTIONS, True),
        (["read_exams"], ConsoleAction.EDIT_QUESTIONS, False),
        (["write_exams"], ConsoleAction.PUBLISH_EXAM, True),
        (["write_exams"], ConsoleAction.IMPORT_QUESTIONS, True),
        ([], ConsoleAction.IMPORT_CLASSES, False),
    ],
)
def test_is_allowed(permissions, action, allowed):
    assert is_allowed(parse_capabilities(permissions), action) is allowed


def test_actor_capabilities():
    actor = Actor.model_validate({"_id": "u1", "permissions": ["write_classes", "unknown"]})

    assert actor.capabilities == frozenset({Capability.WRITE_CLASSES})


def test_exam_badges():
    assert exam_state_badge(ExamState.DRAFT) == BadgeVariant.WARNING
    assert exam_state_badge(ExamState.PUBLISHED) == BadgeVariant.SUCCESS


def test_every_import_session_state_has_a_badge():
    badges = {state: import_session_badge(state) for state in ImportSessionState}

    assert badges[ImportSessionState.INVALID] == BadgeVariant.DANGER
    assert badges[ImportSessionState.CLOSED] == BadgeVariant.SUCCESS
    assert all(isinstance(b, BadgeVariant) for b in badges.values())


def test_unhandled_state_is_an_error():
    with pytest.raises(AssertionError):
        exam_state_badge("archived")  # type: ignore[arg-type]
