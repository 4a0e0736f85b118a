import logging

from sqlalchemy.orm import joinedload

from ..models.application import Application
from ..models.enums import ApplicationStatus, InterviewStatus
from ..models.interview import Interview
from ..utils.error_handlers import ForbiddenError, NotFoundError, ValidationError, get_error_message
from ..utils.validation import normalize_datetime, validate_interview_status, validate_interview_type
from .context import ServiceContext
from .projections import interview_to_dict
from .store import store_errors, utcnow
from .workflow import check_application_transition

logger = logging.getLogger(__name__)


def _load_application(ctx: ServiceContext, application_id: int) -> Application:
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


def _ensure_job_owner(ctx: ServiceContext, application: Application) -> None:
    identity = ctx.require_identity()
    if application.job is None or application.job.posted_by != identity.user_id:
        raise ForbiddenError(get_error_message("forbidden"))


def _duration_minutes(value) -> int:
    if value is None or value == "":
        return 30
    if isinstance(value, bool):
        raise ValidationError("duration_minutes must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("duration_minutes must be a whole number") from None


def schedule_interview(ctx: ServiceContext, application_id: int, data: dict) -> dict:
    """Schedule an interview and move the application to `interview`.

    Applications whose status cannot move to `interview` (rejected, hired,
    withdrawn) get a ConflictError and no interview row.
    """
    identity = ctx.require_identity()
    application = _load_application(ctx, application_id)
    _ensure_job_owner(ctx, application)

    scheduled_at = normalize_datetime(data.get("scheduled_at"), "scheduled_at")
    if scheduled_at is None:
        raise ValidationError("scheduled_at is required")
    duration = _duration_minutes(data.get("duration_minutes"))
    if duration <= 0 or duration > 8 * 60:
        raise ValidationError("duration_minutes must be between 1 and 480")

    target = check_application_transition(application.status, ApplicationStatus.INTERVIEW.value)

    interview = Interview(
        application_id=application.id,
        interview_type=validate_interview_type(data.get("interview_type") or "video"),
        scheduled_at=scheduled_at,
        duration_minutes=duration,
        interviewer_id=int(data.get("interviewer_id") or identity.user_id),
        status=InterviewStatus.SCHEDULED.value,
        notes=(data.get("notes") or None),
    )

    application.status = target
    application.updated_at = utcnow()

    with store_errors(ctx.db, "scheduling interview"):
        ctx.db.add(interview)
        ctx.db.commit()
        ctx.db.refresh(interview)
    logger.info("Interview %s scheduled for application %s", interview.id, application.id)
    return interview_to_dict(interview)


def list_interviews_for_application(ctx: ServiceContext, application_id: int) -> list[dict]:
    identity = ctx.require_identity()
    application = _load_application(ctx, application_id)
    is_owner = application.job is not None and application.job.posted_by == identity.user_id
    if not is_owner and application.applicant_id != identity.user_id:
        raise ForbiddenError(get_error_message("forbidden"))

    with store_errors(ctx.db, "listing interviews"):
        rows = (
            ctx.db.query(Interview)
            .filter(Interview.application_id == application.id)
            .order_by(Interview.scheduled_at.asc())
            .all()
        )
    return [interview_to_dict(i) for i in rows]


def update_interview_status(
    ctx: ServiceContext,
    interview_id: int,
    status: str,
    feedback: str | None = None,
) -> dict:
    target = validate_interview_status(status)
    with store_errors(ctx.db, "fetching interview"):
        interview = (
            ctx.db.query(Interview)
            .options(joinedload(Interview.application).joinedload(Application.job))
            .filter(Interview.id == int(interview_id))
            .first()
        )
    if interview is None:
        raise NotFoundError(get_error_message("interview_not_found"))
    _ensure_job_owner(ctx, interview.application)

    interview.status = target
    if feedback:
        interview.feedback = feedback
    interview.updated_at = utcnow()
    with store_errors(ctx.db, "updating interview"):
        ctx.db.commit()
        ctx.db.refresh(interview)
    return interview_to_dict(interview)
