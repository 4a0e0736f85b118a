from fastapi import APIRouter, Depends, Query

from ..services import application_service, dashboard, job_service
from ..services.context import ServiceContext
from ..services.job_form import JobForm, submit_job_form
from ..services.job_service import JobFilters
from ..utils.dependencies import get_authenticated_context, get_context
from ..utils.roles import employer_only

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("")
def list_jobs(
    search: str | None = Query(default=None, description="Case-insensitive match on title or description"),
    location: str | None = Query(default=None),
    employment_type: str | None = Query(default=None),
    experience_level: str | None = Query(default=None),
    remote_allowed: bool | None = Query(default=None),
    company_id: int | None = Query(default=None),
    ctx: ServiceContext = Depends(get_context),
):
    filters = JobFilters(
        search=search,
        location=location,
        employment_type=employment_type,
        experience_level=experience_level,
        remote_allowed=remote_allowed,
        company_id=company_id,
    )
    return {"success": True, "jobs": job_service.list_jobs(ctx, filters)}


@router.get("/mine")
def my_jobs(ctx: ServiceContext = Depends(employer_only)):
    return {"success": True, "jobs": job_service.list_my_jobs(ctx, ctx.identity.user_id)}


@router.get("/{job_id:int}")
def get_job(job_id: int, ctx: ServiceContext = Depends(get_context)):
    return {"success": True, "job": job_service.get_job(ctx, job_id)}


@router.get("/{job_id:int}/applied")
def has_applied(job_id: int, ctx: ServiceContext = Depends(get_authenticated_context)):
    applied = application_service.has_applied(ctx, job_id, ctx.identity.user_id)
    return {"success": True, "job_id": job_id, "already_applied": applied}


@router.post("", status_code=201)
def create_job(form: JobForm, ctx: ServiceContext = Depends(employer_only)):
    job = submit_job_form(ctx, form)
    return {"success": True, "job": job, "dashboard": dashboard.employer_dashboard(ctx)}


@router.patch("/{job_id:int}")
def update_job(job_id: int, form: JobForm, ctx: ServiceContext = Depends(employer_only)):
    job = submit_job_form(ctx, form, job_id=job_id)
    return {"success": True, "job": job, "dashboard": dashboard.employer_dashboard(ctx)}


@router.delete("/{job_id:int}")
def delete_job(job_id: int, ctx: ServiceContext = Depends(employer_only)):
    job_service.delete_job(ctx, job_id)
    return {"success": True, "deleted_job_id": job_id, "dashboard": dashboard.employer_dashboard(ctx)}
