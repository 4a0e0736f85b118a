from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services import company_service
from ..services.context import ServiceContext
from ..utils.dependencies import get_authenticated_context, get_context
from ..utils.roles import employer_only

router = APIRouter(prefix="/companies", tags=["Companies"])


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    website: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=500)


class CompanyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    website: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=500)


@router.get("")
def list_companies(ctx: ServiceContext = Depends(get_context)):
    return {"success": True, "companies": company_service.list_companies(ctx)}


@router.get("/mine")
def my_companies(ctx: ServiceContext = Depends(get_authenticated_context)):
    return {"success": True, "companies": company_service.list_my_companies(ctx, ctx.identity.user_id)}


@router.get("/{company_id:int}")
def get_company(company_id: int, ctx: ServiceContext = Depends(get_context)):
    return {"success": True, "company": company_service.get_company(ctx, company_id)}


@router.post("", status_code=201)
def create_company(payload: CompanyCreate, ctx: ServiceContext = Depends(employer_only)):
    return {"success": True, "company": company_service.create_company(ctx, payload.model_dump())}


@router.patch("/{company_id:int}")
def update_company(
    company_id: int,
    payload: CompanyUpdate,
    ctx: ServiceContext = Depends(get_authenticated_context),
):
    company = company_service.update_company(ctx, company_id, payload.model_dump(exclude_unset=True))
    return {"success": True, "company": company}


@router.delete("/{company_id:int}")
def delete_company(company_id: int, ctx: ServiceContext = Depends(get_authenticated_context)):
    company_service.delete_company(ctx, company_id)
    return {"success": True, "deleted_company_id": company_id}
