"""
Candidate and employer dashboards.

Each call refetches the user-scoped lists and derives the display counts from
them; nothing is cached between calls.
"""
from collections import Counter

from ..models.enums import ApplicationStatus, JobStatus, enum_values
from . import application_service, job_service
from .context import ServiceContext


def count_by_status(rows: list[dict], statuses: list[str]) -> dict[str, int]:
    """Zero-filled status histogram; statuses outside the list are still counted."""
    counts = Counter(row.get("status") for row in rows)
    result = {status: int(counts.get(status, 0)) for status in statuses}
    for status, n in counts.items():
        if status not in result and status is not None:
            result[status] = int(n)
    return result


def group_by_status(rows: list[dict], statuses: list[str]) -> dict[str, list[dict]]:
    grouped: dict[str, list[dict]] = {status: [] for status in statuses}
    for row in rows:
        grouped.setdefault(row.get("status"), []).append(row)
    return grouped


def candidate_dashboard(ctx: ServiceContext) -> dict:
    identity = ctx.require_role("candidate")
    applications = application_service.list_my_applications(ctx, identity.user_id)
    statuses = enum_values(ApplicationStatus)
    by_status = count_by_status(applications, statuses)
    return {
        "applications": applications,
        "grouped": group_by_status(applications, statuses),
        "stats": {
            "total": len(applications),
            "reviewing": by_status[ApplicationStatus.REVIEWING.value],
            "interview": by_status[ApplicationStatus.INTERVIEW.value],
            "hired": by_status[ApplicationStatus.HIRED.value],
            "by_status": by_status,
        },
    }


def employer_dashboard(ctx: ServiceContext) -> dict:
    identity = ctx.require_role("employer", "admin")
    jobs = job_service.list_my_jobs(ctx, identity.user_id)
    applications = application_service.list_applications_for_my_jobs(ctx, identity.user_id)
    jobs_by_status = count_by_status(jobs, enum_values(JobStatus))
    applications_by_status = count_by_status(applications, enum_values(ApplicationStatus))
    return {
        "jobs": jobs,
        "applications": applications,
        "grouped_applications": group_by_status(applications, enum_values(ApplicationStatus)),
        "stats": {
            "active_jobs": jobs_by_status[JobStatus.ACTIVE.value],
            "total_applications": len(applications),
            "pending_review": applications_by_status[ApplicationStatus.PENDING.value],
            "hired": applications_by_status[ApplicationStatus.HIRED.value],
            "jobs_by_status": jobs_by_status,
            "applications_by_status": applications_by_status,
        },
    }
