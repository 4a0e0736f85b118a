"""
Service-layer errors and the messages shown to job-board users.

Services raise `AppError` subclasses; `main.py` renders them as
`{"success": false, "error": ...}` with the class's status code.
"""
import logging

from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, status_code: int | None = None, details: dict | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Input rejected before (or by) a write."""
    status_code = 400
    default_message = "Invalid input"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized access"


class ForbiddenError(AppError):
    """Signed in, but not the owner or not the right role."""
    status_code = 403
    default_message = "Access forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate row or an illegal status transition."""
    status_code = 409
    default_message = "Conflicting request"


class DatabaseError(AppError):
    status_code = 500
    default_message = "Database operation failed"


ERROR_MESSAGES = {
    # accounts and sessions
    "invalid_credentials": "Incorrect email or password.",
    "email_exists": "That email is already registered. Try signing in instead.",
    "password_mismatch": "Passwords do not match.",
    "session_expired": "Your session has ended. Please sign in again.",
    "not_authenticated": "Sign in to continue.",
    "unauthorized": "Sign in to use this feature.",
    "forbidden": "You are not allowed to do that.",
    "profile_not_found": "No profile exists for this account.",

    # board content
    "company_not_found": "That company does not exist or was removed.",
    "job_not_found": "That job posting does not exist or was removed.",
    "job_closed": "This job is not accepting applications right now.",
    "invalid_job_data": "Some required job fields are missing.",
    "already_applied": "You have already applied to this job.",
    "application_not_found": "That application does not exist.",
    "interview_not_found": "That interview does not exist.",

    # fallbacks
    "validation_error": "Some of the submitted values are invalid.",
    "database_error": "The job board database is unavailable. Please try again shortly.",
    "server_error": "Unexpected server error. Please try again later.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    return ERROR_MESSAGES.get(error_key) or default or ERROR_MESSAGES["server_error"]


def handle_database_error(error: SQLAlchemyError, operation: str = "") -> AppError:
    """Map a store failure onto an AppError. The caller raises it."""
    logger.error("Store failure while %s: %s", operation or "running a query", error)

    reason = str(getattr(error, "orig", None) or error).lower()

    if isinstance(error, IntegrityError):
        if "unique" in reason or "duplicate" in reason:
            return ConflictError("This record already exists.")
        if "foreign key" in reason:
            return ValidationError("The record is referenced by, or refers to, a row that does not allow this change.")
        if "not null" in reason:
            return ValidationError(get_error_message("validation_error"))

    if isinstance(error, OperationalError) or "connection" in reason:
        return DatabaseError(get_error_message("database_error"))

    return DatabaseError(get_error_message("server_error"))


def create_error_response(status_code: int, message: str, details: dict | None = None) -> JSONResponse:
    body = {"success": False, "error": message}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)
