import pytest

from backend.app.models.enums import ApplicationStatus, JobStatus, enum_values
from backend.app.services.workflow import (
    APPLICATION_TRANSITIONS,
    JOB_TRANSITIONS,
    can_transition,
    check_application_transition,
    check_job_transition,
)
from backend.app.utils.error_handlers import ConflictError


def test_every_status_has_a_row():
    assert set(APPLICATION_TRANSITIONS) == set(enum_values(ApplicationStatus))
    assert set(JOB_TRANSITIONS) == set(enum_values(JobStatus))


@pytest.mark.parametrize("status", enum_values(ApplicationStatus))
def test_same_status_is_always_allowed(status):
    assert check_application_transition(status, status) == status


@pytest.mark.parametrize(
    "current, target",
    [
        ("pending", "reviewing"),
        ("reviewing", "interview"),
        ("interview", "hired"),
        ("interview", "rejected"),
        ("rejected", "reviewing"),
        ("pending", "withdrawn"),
    ],
)
def test_allowed_application_moves(current, target):
    assert can_transition(APPLICATION_TRANSITIONS, current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        ("hired", "pending"),
        ("withdrawn", "reviewing"),
        ("rejected", "hired"),
        ("interview", "pending"),
    ],
)
def test_blocked_application_moves(current, target):
    with pytest.raises(ConflictError) as exc:
        check_application_transition(current, target)
    assert exc.value.details["from"] == current
    assert exc.value.details["to"] == target


def test_job_moves():
    assert check_job_transition("draft", "active") == "active"
    assert check_job_transition("closed", "active") == "active"
    with pytest.raises(ConflictError):
        check_job_transition("active", "draft")
    with pytest.raises(ConflictError):
        check_job_transition("paused", "draft")


def test_unknown_current_status_is_permissive_only_for_none():
    assert can_transition(JOB_TRANSITIONS, None, "active")
    assert not can_transition(JOB_TRANSITIONS, "archived", "active")
