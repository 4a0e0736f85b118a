from fastapi import APIRouter, Depends

from ..services import dashboard
from ..services.context import ServiceContext
from ..utils.roles import candidate_only, employer_only

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/candidate")
def candidate_dashboard(ctx: ServiceContext = Depends(candidate_only)):
    return {"success": True, **dashboard.candidate_dashboard(ctx)}


@router.get("/employer")
def employer_dashboard(ctx: ServiceContext = Depends(employer_only)):
    return {"success": True, **dashboard.employer_dashboard(ctx)}
