from fastapi import Depends

from ..services.context import ServiceContext
from .dependencies import get_authenticated_context


def _role_required(*roles: str):
    def check_role(ctx: ServiceContext = Depends(get_authenticated_context)) -> ServiceContext:
        ctx.require_role(*roles)
        return ctx
    return check_role


employer_only = _role_required("employer", "admin")
candidate_only = _role_required("candidate")
