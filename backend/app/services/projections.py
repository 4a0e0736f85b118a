"""Row -> plain dict projections returned by the services."""
from datetime import datetime

from ..models.application import Application
from ..models.company import Company
from ..models.interview import Interview
from ..models.job import Job
from ..models.user_profile import UserProfile


def _iso(value):
    return value.isoformat() if isinstance(value, datetime) else value


def company_to_dict(company: Company | None) -> dict | None:
    if company is None:
        return None
    return {
        "id": company.id,
        "name": company.name,
        "description": company.description,
        "website": company.website,
        "logo_url": company.logo_url,
        "created_by": company.created_by,
        "created_at": _iso(company.created_at),
        "updated_at": _iso(company.updated_at),
    }


def profile_to_dict(profile: UserProfile | None) -> dict | None:
    if profile is None:
        return None
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "user_type": profile.user_type,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "phone": profile.phone,
        "bio": profile.bio,
        "location": profile.location,
        "profile_picture_url": profile.profile_picture_url,
        "resume_url": profile.resume_url,
        "linkedin_url": profile.linkedin_url,
        "github_url": profile.github_url,
        "portfolio_url": profile.portfolio_url,
        "skills": profile.skills,
        "experience_years": int(profile.experience_years or 0),
        "created_at": _iso(profile.created_at),
        "updated_at": _iso(profile.updated_at),
    }


def job_to_dict(
    job: Job,
    *,
    applications_count: int | None = None,
    include_company: bool = True,
    include_poster: bool = False,
) -> dict:
    payload = {
        "id": job.id,
        "title": job.title,
        "company_id": job.company_id,
        "description": job.description,
        "requirements": job.requirements,
        "location": job.location,
        "remote_allowed": bool(job.remote_allowed),
        "employment_type": job.employment_type,
        "experience_level": job.experience_level,
        "salary_min": job.salary_min,
        "salary_max": job.salary_max,
        "status": job.status,
        "posted_by": job.posted_by,
        "deadline": _iso(job.deadline),
        "created_at": _iso(job.created_at),
        "updated_at": _iso(job.updated_at),
    }
    if include_company:
        payload["company"] = company_to_dict(job.company)
    if include_poster:
        poster = job.poster
        payload["posted_by_profile"] = profile_to_dict(poster.profile if poster else None)
    if applications_count is not None:
        # Derived at read time; never stored.
        payload["applications_count"] = int(applications_count or 0)
    return payload


def application_to_dict(
    application: Application,
    *,
    include_job: bool = True,
    include_applicant: bool = False,
) -> dict:
    payload = {
        "id": application.id,
        "job_id": application.job_id,
        "applicant_id": application.applicant_id,
        "cover_letter": application.cover_letter,
        "resume_url": application.resume_url,
        "status": application.status,
        "notes": application.notes,
        "applied_at": _iso(application.applied_at),
        "updated_at": _iso(application.updated_at),
    }
    if include_job:
        payload["job"] = job_to_dict(application.job) if application.job else None
    if include_applicant:
        applicant = application.applicant
        payload["applicant"] = profile_to_dict(applicant.profile if applicant else None)
    return payload


def interview_to_dict(interview: Interview) -> dict:
    return {
        "id": interview.id,
        "application_id": interview.application_id,
        "interview_type": interview.interview_type,
        "scheduled_at": _iso(interview.scheduled_at),
        "duration_minutes": interview.duration_minutes,
        "interviewer_id": interview.interviewer_id,
        "status": interview.status,
        "notes": interview.notes,
        "feedback": interview.feedback,
        "created_at": _iso(interview.created_at),
        "updated_at": _iso(interview.updated_at),
    }
