from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..services import auth_service
from ..services.context import ServiceContext
from ..utils.dependencies import get_authenticated_context, get_context

router = APIRouter(prefix="/auth", tags=["Auth"])


class SignupRequest(BaseModel):
    email: str
    password: str
    password_confirm: str | None = None
    user_type: str = "candidate"  # candidate / employer
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str
    role: str | None = None  # optional role gate (frontend-selected account type)


@router.post("/signup")
def signup(payload: SignupRequest, ctx: ServiceContext = Depends(get_context)):
    session = auth_service.sign_up(
        ctx,
        payload.email,
        payload.password,
        {
            "user_type": payload.user_type,
            "first_name": payload.first_name,
            "last_name": payload.last_name,
        },
        password_confirm=payload.password_confirm,
    )
    return {"success": True, "message": "User created successfully", **session.to_dict()}


@router.post("/login")
def login(payload: LoginRequest, ctx: ServiceContext = Depends(get_context)):
    session = auth_service.sign_in(ctx, payload.email, payload.password, role=payload.role)
    return {"success": True, **session.to_dict()}


@router.post("/logout")
def logout(ctx: ServiceContext = Depends(get_authenticated_context)):
    auth_service.sign_out(ctx)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/session")
def session(ctx: ServiceContext = Depends(get_authenticated_context)):
    return {"success": True, **auth_service.get_session(ctx)}
