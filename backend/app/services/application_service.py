"""
Application queries, submission and status workflow.
"""
import logging

from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import contains_eager, joinedload

from ..models.application import Application
from ..models.enums import ApplicationStatus, JobStatus
from ..models.job import Job
from ..models.user import User
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    get_error_message,
)
from ..utils.validation import validate_application_status
from .context import ServiceContext
from .projections import application_to_dict
from .store import store_errors, utcnow
from .workflow import check_application_transition

logger = logging.getLogger(__name__)

APPLICATION_INPUT_FIELDS = ("job_id", "cover_letter", "resume_url")


def list_my_applications(ctx: ServiceContext, user_id: int) -> list[dict]:
    """The user's applications with job and company, newest first."""
    with store_errors(ctx.db, "listing my applications"):
        rows = (
            ctx.db.query(Application)
            .options(joinedload(Application.job).joinedload(Job.company))
            .filter(Application.applicant_id == int(user_id))
            .order_by(Application.applied_at.desc(), Application.id.desc())
            .all()
        )
    return [application_to_dict(a) for a in rows]


def list_applications_for_my_jobs(ctx: ServiceContext, user_id: int) -> list[dict]:
    """
    Applications received on jobs posted by `user_id`.

    Inner join on jobs: jobs without applications contribute no rows.
    """
    with store_errors(ctx.db, "listing applications for my jobs"):
        rows = (
            ctx.db.query(Application)
            .join(Application.job)
            .options(
                contains_eager(Application.job).joinedload(Job.company),
                joinedload(Application.applicant).joinedload(User.profile),
            )
            .filter(Job.posted_by == int(user_id))
            .order_by(Application.applied_at.desc(), Application.id.desc())
            .all()
        )
    return [application_to_dict(a, include_applicant=True) for a in rows]


def has_applied(ctx: ServiceContext, job_id: int, user_id: int) -> bool:
    """
    Point lookup for an existing application.

    "No row" is a normal negative answer; any other failure (including more
    than one row) propagates.
    """
    query = ctx.db.query(Application.id).filter(
        Application.job_id == int(job_id),
        Application.applicant_id == int(user_id),
    )
    with store_errors(ctx.db, "checking existing application"):
        try:
            query.one()
        except NoResultFound:
            return False
    return True


def create_application(ctx: ServiceContext, data: dict) -> dict:
    """
    Submit an application as the authenticated user.

    `applicant_id` always comes from the context identity; any value in
    `data` is ignored.
    """
    identity = ctx.require_identity()
    values = {k: v for k, v in data.items() if k in APPLICATION_INPUT_FIELDS}
    if values.get("job_id") is None:
        raise ValidationError("job_id is required")
    job_id = int(values["job_id"])

    with store_errors(ctx.db, "fetching job"):
        job = ctx.db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))
    if job.status != JobStatus.ACTIVE.value:
        raise ValidationError(get_error_message("job_closed"))

    if has_applied(ctx, job_id, identity.user_id):
        raise ConflictError(get_error_message("already_applied"))

    application = Application(
        job_id=job_id,
        applicant_id=identity.user_id,
        cover_letter=(values.get("cover_letter") or None),
        resume_url=(values.get("resume_url") or None),
        status=ApplicationStatus.PENDING.value,
    )
    with store_errors(ctx.db, "creating application"):
        ctx.db.add(application)
        ctx.db.commit()
        ctx.db.refresh(application)
    logger.info("User %s applied to job %s (application %s)", identity.user_id, job_id, application.id)
    return application_to_dict(application)


def _get_application(ctx: ServiceContext, application_id: int) -> Application:
    with store_errors(ctx.db, "fetching application"):
        application = (
            ctx.db.query(Application)
            .options(joinedload(Application.job))
            .filter(Application.id == int(application_id))
            .first()
        )
    if application is None:
        raise NotFoundError(get_error_message("application_not_found"))
    return application


def _set_status(ctx: ServiceContext, application: Application, status: str, notes: str | None) -> dict:
    previous = application.status
    application.status = check_application_transition(previous, status)
    if notes:
        application.notes = notes
    # Refreshed on every call, including same-status updates.
    application.updated_at = utcnow()
    with store_errors(ctx.db, "updating application status"):
        ctx.db.commit()
        ctx.db.refresh(application)
    logger.info("Application %s status %s -> %s", application.id, previous, application.status)
    return application_to_dict(application)


def update_application_status(
    ctx: ServiceContext,
    application_id: int,
    status: str,
    notes: str | None = None,
) -> dict:
    """Employer-side status change on an application to one of their jobs."""
    identity = ctx.require_identity()
    target = validate_application_status(status)
    application = _get_application(ctx, application_id)

    if application.job is None or application.job.posted_by != identity.user_id:
        raise ForbiddenError("You can only update applications for your own jobs")
    if target == ApplicationStatus.WITHDRAWN.value and application.status != target:
        raise ForbiddenError("Only the applicant can withdraw an application")

    return _set_status(ctx, application, target, notes)


def withdraw_application(ctx: ServiceContext, application_id: int) -> dict:
    identity = ctx.require_identity()
    application = _get_application(ctx, application_id)
    if application.applicant_id != identity.user_id:
        raise ForbiddenError("You can only withdraw your own applications")
    return _set_status(ctx, application, ApplicationStatus.WITHDRAWN.value, None)
