from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services import auth_service
from ..services.context import ServiceContext
from ..utils.dependencies import get_authenticated_context

router = APIRouter(prefix="/profile", tags=["Profile"])


class ProfileUpdate(BaseModel):
    first_name: str | None = Field(default=None, max_length=120)
    last_name: str | None = Field(default=None, max_length=120)
    phone: str | None = Field(default=None, max_length=50)
    bio: str | None = None
    location: str | None = Field(default=None, max_length=255)
    profile_picture_url: str | None = Field(default=None, max_length=500)
    resume_url: str | None = Field(default=None, max_length=500)
    linkedin_url: str | None = Field(default=None, max_length=500)
    github_url: str | None = Field(default=None, max_length=500)
    portfolio_url: str | None = Field(default=None, max_length=500)
    skills: str | None = None
    experience_years: int | str | None = None


@router.get("")
def get_profile(ctx: ServiceContext = Depends(get_authenticated_context)):
    return {"success": True, "profile": auth_service.get_session(ctx)["profile"]}


@router.patch("")
def update_profile(payload: ProfileUpdate, ctx: ServiceContext = Depends(get_authenticated_context)):
    profile = auth_service.update_profile(ctx, payload.model_dump(exclude_unset=True))
    return {"success": True, "profile": profile}
