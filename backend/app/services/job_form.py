"""
Job form: raw field state as submitted by the UI and its coercion into job
values at submit time.
"""
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..utils.error_handlers import ValidationError
from . import job_service
from .context import ServiceContext


class JobForm(BaseModel):
    title: str = ""
    company_id: int | str = ""
    description: str = ""
    requirements: str = ""
    location: str = ""
    remote_allowed: bool = False
    employment_type: str = "full_time"
    experience_level: str = "mid"
    salary_min: str | float | int | None = Field(default="")
    salary_max: str | float | int | None = Field(default="")
    status: str = "draft"
    deadline: str | None = ""  # YYYY-MM-DD from a date input, or full ISO

    @classmethod
    def from_job(cls, job: dict) -> "JobForm":
        """Prefill the form from an existing job projection."""
        deadline = job.get("deadline")
        return cls(
            title=job.get("title") or "",
            company_id=job.get("company_id") or "",
            description=job.get("description") or "",
            requirements=job.get("requirements") or "",
            location=job.get("location") or "",
            remote_allowed=bool(job.get("remote_allowed")),
            employment_type=job.get("employment_type") or "full_time",
            experience_level=job.get("experience_level") or "mid",
            salary_min=job.get("salary_min") if job.get("salary_min") is not None else "",
            salary_max=job.get("salary_max") if job.get("salary_max") is not None else "",
            status=job.get("status") or "draft",
            deadline=deadline.split("T")[0] if isinstance(deadline, str) and deadline else "",
        )

    def to_job_data(self) -> dict:
        return {
            "title": self.title,
            "company_id": self.company_id,
            "description": self.description,
            "requirements": self.requirements,
            "location": self.location,
            "remote_allowed": self.remote_allowed,
            "employment_type": self.employment_type,
            "experience_level": self.experience_level,
            "salary_min": _coerce_salary(self.salary_min, "salary_min"),
            "salary_max": _coerce_salary(self.salary_max, "salary_max"),
            "status": self.status,
            "deadline": _coerce_deadline(self.deadline),
        }

    def to_job_changes(self) -> dict:
        """Only the fields the client actually sent, coerced like `to_job_data`."""
        changes = self.model_dump(exclude_unset=True)
        for field in ("salary_min", "salary_max"):
            if field in changes:
                changes[field] = _coerce_salary(changes[field], field)
        if "deadline" in changes:
            changes["deadline"] = _coerce_deadline(changes["deadline"])
        return changes


def _coerce_salary(value, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None


def _coerce_deadline(value: str | None) -> datetime | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("Invalid deadline format. Use YYYY-MM-DD.") from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def submit_job_form(ctx: ServiceContext, form: JobForm, job_id: int | None = None) -> dict:
    """Partial update when editing an existing job, create from the full form otherwise."""
    if job_id is not None:
        return job_service.update_job(ctx, job_id, form.to_job_changes())
    return job_service.create_job(ctx, form.to_job_data())
