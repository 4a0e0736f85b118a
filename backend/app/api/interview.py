from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services import interview_service
from ..services.context import ServiceContext
from ..utils.dependencies import get_authenticated_context
from ..utils.roles import employer_only

router = APIRouter(prefix="/interviews", tags=["Interviews"])


class InterviewScheduleIn(BaseModel):
    application_id: int = Field(..., ge=1)
    scheduled_at: str = Field(..., min_length=6)  # ISO datetime; naive values are taken as UTC
    interview_type: str = "video"
    duration_minutes: int = Field(default=30, ge=1, le=480)
    interviewer_id: int | None = None
    notes: str | None = None


class InterviewUpdateIn(BaseModel):
    status: str
    feedback: str | None = None


@router.post("/schedule")
def schedule_interview(payload: InterviewScheduleIn, ctx: ServiceContext = Depends(employer_only)):
    data = payload.model_dump(exclude={"application_id"})
    interview = interview_service.schedule_interview(ctx, payload.application_id, data)
    return {"success": True, "interview": interview}


@router.get("/application/{application_id:int}")
def application_interviews(application_id: int, ctx: ServiceContext = Depends(get_authenticated_context)):
    items = interview_service.list_interviews_for_application(ctx, application_id)
    return {"success": True, "interviews": items}


@router.patch("/{interview_id:int}")
def update_interview(
    interview_id: int,
    payload: InterviewUpdateIn,
    ctx: ServiceContext = Depends(employer_only),
):
    interview = interview_service.update_interview_status(ctx, interview_id, payload.status, payload.feedback)
    return {"success": True, "interview": interview}
