"""
Status transition tables for applications and jobs.

A move to the current status is always allowed (callers still refresh
`updated_at`). Anything not listed raises `ConflictError`.
"""
from ..models.enums import ApplicationStatus as A
from ..models.enums import JobStatus as J
from ..utils.error_handlers import ConflictError

APPLICATION_TRANSITIONS: dict[str, frozenset[str]] = {
    A.PENDING.value: frozenset({A.REVIEWING.value, A.INTERVIEW.value, A.REJECTED.value, A.HIRED.value, A.WITHDRAWN.value}),
    A.REVIEWING.value: frozenset({A.PENDING.value, A.INTERVIEW.value, A.REJECTED.value, A.HIRED.value, A.WITHDRAWN.value}),
    A.INTERVIEW.value: frozenset({A.REVIEWING.value, A.REJECTED.value, A.HIRED.value, A.WITHDRAWN.value}),
    # Rejected candidates can be reconsidered.
    A.REJECTED.value: frozenset({A.REVIEWING.value}),
    A.HIRED.value: frozenset(),
    A.WITHDRAWN.value: frozenset(),
}

JOB_TRANSITIONS: dict[str, frozenset[str]] = {
    J.DRAFT.value: frozenset({J.ACTIVE.value, J.CLOSED.value}),
    J.ACTIVE.value: frozenset({J.PAUSED.value, J.CLOSED.value}),
    J.PAUSED.value: frozenset({J.ACTIVE.value, J.CLOSED.value}),
    J.CLOSED.value: frozenset({J.ACTIVE.value}),
}


def can_transition(table: dict[str, frozenset[str]], current: str | None, target: str) -> bool:
    if current is None or current == target:
        return True
    return target in table.get(current, frozenset())


def _check(table: dict[str, frozenset[str]], kind: str, current: str | None, target: str) -> str:
    if not can_transition(table, current, target):
        raise ConflictError(
            f"Cannot move {kind} from '{current}' to '{target}'",
            details={"from": current, "to": target, "allowed": sorted(table.get(current or "", ()))},
        )
    return target


def check_application_transition(current: str | None, target: str) -> str:
    return _check(APPLICATION_TRANSITIONS, "application", current, target)


def check_job_transition(current: str | None, target: str) -> str:
    return _check(JOB_TRANSITIONS, "job", current, target)
