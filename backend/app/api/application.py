from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services import application_service, dashboard
from ..services.context import ServiceContext
from ..utils.dependencies import get_authenticated_context
from ..utils.roles import candidate_only, employer_only

router = APIRouter(prefix="/applications", tags=["Applications"])


class ApplicationCreate(BaseModel):
    job_id: int = Field(..., ge=1)
    cover_letter: str | None = None
    resume_url: str | None = Field(default=None, max_length=500)


class StatusUpdate(BaseModel):
    status: str
    notes: str | None = None


@router.get("/mine")
def my_applications(ctx: ServiceContext = Depends(get_authenticated_context)):
    items = application_service.list_my_applications(ctx, ctx.identity.user_id)
    return {"success": True, "applications": items}


@router.get("/received")
def received_applications(ctx: ServiceContext = Depends(employer_only)):
    items = application_service.list_applications_for_my_jobs(ctx, ctx.identity.user_id)
    return {"success": True, "applications": items}


@router.post("", status_code=201)
def apply(payload: ApplicationCreate, ctx: ServiceContext = Depends(candidate_only)):
    application = application_service.create_application(ctx, payload.model_dump())
    return {"success": True, "application": application}


@router.patch("/{application_id:int}/status")
def update_status(
    application_id: int,
    payload: StatusUpdate,
    ctx: ServiceContext = Depends(employer_only),
):
    application = application_service.update_application_status(
        ctx, application_id, payload.status, payload.notes
    )
    return {"success": True, "application": application, "dashboard": dashboard.employer_dashboard(ctx)}


@router.post("/{application_id:int}/withdraw")
def withdraw(application_id: int, ctx: ServiceContext = Depends(candidate_only)):
    application = application_service.withdraw_application(ctx, application_id)
    return {"success": True, "application": application, "dashboard": dashboard.candidate_dashboard(ctx)}
