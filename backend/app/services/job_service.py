"""
Job queries and single-row writes.

Listing endpoints carry a derived `applications_count`, computed per query
from an outer-joined aggregate so jobs without applications report 0.
"""
import logging

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.orm import joinedload

from ..models.application import Application
from ..models.company import Company
from ..models.enums import EmploymentType, ExperienceLevel, JobStatus
from ..models.job import Job
from ..models.user import User
from ..utils.error_handlers import ForbiddenError, NotFoundError, get_error_message
from ..utils.validation import validate_choice, validate_job_fields
from .context import ServiceContext
from .projections import job_to_dict
from .store import store_errors, utcnow
from .workflow import check_job_transition

logger = logging.getLogger(__name__)

JOB_WRITABLE_FIELDS = (
    "title",
    "company_id",
    "description",
    "requirements",
    "location",
    "remote_allowed",
    "employment_type",
    "experience_level",
    "salary_min",
    "salary_max",
    "status",
    "deadline",
)


class JobFilters(BaseModel):
    search: str | None = None
    location: str | None = None
    employment_type: str | None = None
    experience_level: str | None = None
    remote_allowed: bool | None = None
    company_id: int | None = None


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _with_application_counts(db):
    counts = (
        db.query(Application.job_id.label("job_id"), func.count(Application.id).label("applications_count"))
        .group_by(Application.job_id)
        .subquery()
    )
    return (
        db.query(Job, func.coalesce(counts.c.applications_count, 0))
        .outerjoin(counts, counts.c.job_id == Job.id)
        .options(joinedload(Job.company))
    )


def list_jobs(ctx: ServiceContext, filters: JobFilters | None = None) -> list[dict]:
    """Active jobs only, newest first, narrowed by whichever filters are set."""
    filters = filters or JobFilters()
    q = _with_application_counts(ctx.db).filter(Job.status == JobStatus.ACTIVE.value)

    search = (filters.search or "").strip()
    if search:
        pattern = _like_pattern(search)
        q = q.filter(or_(Job.title.ilike(pattern, escape="\\"), Job.description.ilike(pattern, escape="\\")))

    location = (filters.location or "").strip()
    if location:
        q = q.filter(Job.location.ilike(_like_pattern(location), escape="\\"))

    if filters.employment_type:
        q = q.filter(Job.employment_type == validate_choice(filters.employment_type, EmploymentType, "employment_type"))

    if filters.experience_level:
        q = q.filter(Job.experience_level == validate_choice(filters.experience_level, ExperienceLevel, "experience_level"))

    if filters.remote_allowed is not None:
        q = q.filter(Job.remote_allowed == bool(filters.remote_allowed))

    if filters.company_id is not None:
        q = q.filter(Job.company_id == int(filters.company_id))

    with store_errors(ctx.db, "listing jobs"):
        rows = q.order_by(Job.created_at.desc(), Job.id.desc()).all()
    return [job_to_dict(job, applications_count=count) for job, count in rows]


def get_job(ctx: ServiceContext, job_id: int) -> dict:
    with store_errors(ctx.db, "fetching job"):
        job = (
            ctx.db.query(Job)
            .options(
                joinedload(Job.company),
                joinedload(Job.poster).joinedload(User.profile),
            )
            .filter(Job.id == int(job_id))
            .first()
        )
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))
    return job_to_dict(job, include_poster=True)


def list_my_jobs(ctx: ServiceContext, user_id: int) -> list[dict]:
    """Every job the user posted, whatever its status."""
    q = _with_application_counts(ctx.db).filter(Job.posted_by == int(user_id))
    with store_errors(ctx.db, "listing my jobs"):
        rows = q.order_by(Job.created_at.desc(), Job.id.desc()).all()
    return [job_to_dict(job, applications_count=count) for job, count in rows]


def _check_company(ctx: ServiceContext, company_id: int) -> None:
    identity = ctx.require_identity()
    with store_errors(ctx.db, "fetching company"):
        company = ctx.db.query(Company).filter(Company.id == int(company_id)).first()
    if company is None:
        raise NotFoundError(get_error_message("company_not_found"))
    if identity.role != "admin" and company.created_by != identity.user_id:
        raise ForbiddenError("You can only post jobs for companies you created")


def _get_owned_job(ctx: ServiceContext, job_id: int) -> Job:
    identity = ctx.require_identity()
    with store_errors(ctx.db, "fetching job"):
        job = ctx.db.query(Job).filter(Job.id == int(job_id)).first()
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))
    if identity.role != "admin" and job.posted_by != identity.user_id:
        raise ForbiddenError("You can only manage your own jobs")
    return job


def create_job(ctx: ServiceContext, data: dict) -> dict:
    identity = ctx.require_role("employer", "admin")
    values = validate_job_fields({k: v for k, v in data.items() if k in JOB_WRITABLE_FIELDS})
    _check_company(ctx, values["company_id"])

    job = Job(**values, posted_by=identity.user_id)
    with store_errors(ctx.db, "creating job"):
        ctx.db.add(job)
        ctx.db.commit()
        ctx.db.refresh(job)
    logger.info("Job %s created by user %s (status=%s)", job.id, identity.user_id, job.status)
    return job_to_dict(job)


def update_job(ctx: ServiceContext, job_id: int, updates: dict) -> dict:
    """Partial update by the owner; always refreshes `updated_at`."""
    job = _get_owned_job(ctx, job_id)
    changes = {k: v for k, v in updates.items() if k in JOB_WRITABLE_FIELDS}

    # Validate the row as it will be stored so cross-field rules see both sides.
    merged = {field: getattr(job, field) for field in JOB_WRITABLE_FIELDS}
    merged.update(changes)
    validated = validate_job_fields(merged)

    if "status" in changes:
        check_job_transition(job.status, validated["status"])
    if "company_id" in changes and validated["company_id"] != job.company_id:
        _check_company(ctx, validated["company_id"])

    for field in changes:
        setattr(job, field, validated[field])
    job.updated_at = utcnow()

    with store_errors(ctx.db, "updating job"):
        ctx.db.commit()
        ctx.db.refresh(job)
    return job_to_dict(job)


def delete_job(ctx: ServiceContext, job_id: int) -> None:
    job = _get_owned_job(ctx, job_id)
    with store_errors(ctx.db, "deleting job"):
        ctx.db.delete(job)
        ctx.db.commit()
    logger.info("Job %s deleted by user %s", job_id, ctx.identity.user_id)
