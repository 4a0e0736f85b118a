"""
Validation utilities applied before any write, independent of the HTTP layer.
"""
import re
from datetime import date, datetime, timezone
from typing import Any

from ..config import MIN_PASSWORD_LENGTH
from ..models.enums import (
    ApplicationStatus,
    EmploymentType,
    ExperienceLevel,
    InterviewStatus,
    InterviewType,
    JobStatus,
    UserType,
    enum_values,
)
from .error_handlers import ValidationError, get_error_message

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

JOB_REQUIRED_FIELDS = ("title", "company_id", "location", "description", "requirements")


def validate_email(email: str) -> str:
    """Validate email format."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")

    email = email.strip().lower()
    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    if not re.match(EMAIL_PATTERN, email):
        raise ValidationError("Invalid email format")

    return email


def validate_password(password: str) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password) > 128:
        raise ValidationError("Password too long (max 128 characters)")


def validate_password_confirmation(password: str, password_confirm: str | None) -> None:
    if password_confirm is not None and password != password_confirm:
        raise ValidationError(get_error_message("password_mismatch"))


def validate_choice(value: Any, enum_cls, field_name: str) -> str:
    """Return the normalised enum value or raise."""
    raw = value.value if isinstance(value, enum_cls) else value
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(f"{field_name} is required")
    raw = raw.strip().lower()
    allowed = enum_values(enum_cls)
    if raw not in allowed:
        raise ValidationError(f"Invalid {field_name}. Must be one of: {', '.join(allowed)}")
    return raw


def validate_user_type(value: Any) -> str:
    return validate_choice(value, UserType, "user_type")


def validate_job_status(value: Any) -> str:
    return validate_choice(value, JobStatus, "status")


def validate_application_status(value: Any) -> str:
    return validate_choice(value, ApplicationStatus, "status")


def validate_interview_status(value: Any) -> str:
    return validate_choice(value, InterviewStatus, "status")


def validate_interview_type(value: Any) -> str:
    return validate_choice(value, InterviewType, "interview_type")


def validate_salary(value: Any, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def validate_salary_range(salary_min: float | None, salary_max: float | None) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValidationError("salary_min must not exceed salary_max")


def normalize_datetime(value: Any, field_name: str) -> datetime | None:
    """Accept datetimes, dates and ISO strings; return an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid {field_name} format. Use ISO 8601 format.") from None
    else:
        raise ValidationError(f"Invalid {field_name} format. Use ISO 8601 format.")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def validate_job_fields(data: dict, *, partial: bool = False) -> dict:
    """
    Validate and normalise job values before a write.

    With `partial=False` every required field must be present and non-blank.
    `data` is expected to hold the *merged* values on update so the salary
    bounds are checked against the row as it will be stored.
    """
    cleaned = dict(data)

    for field in JOB_REQUIRED_FIELDS:
        if field not in cleaned:
            if partial:
                continue
            raise ValidationError(get_error_message("invalid_job_data"), details={"field": field})
        value = cleaned[field]
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field} is required", details={"field": field})
        if isinstance(value, str):
            cleaned[field] = value.strip()

    if "employment_type" in cleaned or not partial:
        cleaned["employment_type"] = validate_choice(
            cleaned.get("employment_type", EmploymentType.FULL_TIME.value), EmploymentType, "employment_type"
        )
    if "experience_level" in cleaned or not partial:
        cleaned["experience_level"] = validate_choice(
            cleaned.get("experience_level", ExperienceLevel.MID.value), ExperienceLevel, "experience_level"
        )
    if "status" in cleaned or not partial:
        cleaned["status"] = validate_job_status(cleaned.get("status", JobStatus.DRAFT.value))

    if "company_id" in cleaned:
        try:
            cleaned["company_id"] = int(cleaned["company_id"])
        except (TypeError, ValueError):
            raise ValidationError("company_id must be a valid integer") from None

    if "remote_allowed" in cleaned:
        cleaned["remote_allowed"] = bool(cleaned["remote_allowed"])

    for field in ("salary_min", "salary_max"):
        if field in cleaned:
            cleaned[field] = validate_salary(cleaned[field], field)
    validate_salary_range(cleaned.get("salary_min"), cleaned.get("salary_max"))

    if "deadline" in cleaned:
        cleaned["deadline"] = normalize_datetime(cleaned["deadline"], "deadline")

    return cleaned
