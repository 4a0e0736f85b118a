import logging

from ..models.company import Company
from ..utils.error_handlers import ForbiddenError, NotFoundError, ValidationError, get_error_message
from .context import ServiceContext
from .projections import company_to_dict
from .store import store_errors, utcnow

logger = logging.getLogger(__name__)

COMPANY_FIELDS = ("name", "description", "website", "logo_url")


def _clean(data: dict, *, partial: bool) -> dict:
    cleaned = {k: v for k, v in data.items() if k in COMPANY_FIELDS}
    if "name" in cleaned or not partial:
        name = (cleaned.get("name") or "").strip()
        if not name:
            raise ValidationError("Company name is required")
        cleaned["name"] = name
    for key in ("description", "website", "logo_url"):
        if key in cleaned and isinstance(cleaned[key], str):
            cleaned[key] = cleaned[key].strip() or None
    return cleaned


def _get_row(ctx: ServiceContext, company_id: int) -> Company:
    with store_errors(ctx.db, "fetching company"):
        company = ctx.db.query(Company).filter(Company.id == int(company_id)).first()
    if company is None:
        raise NotFoundError(get_error_message("company_not_found"))
    return company


def _get_owned_row(ctx: ServiceContext, company_id: int) -> Company:
    identity = ctx.require_identity()
    company = _get_row(ctx, company_id)
    if company.created_by != identity.user_id:
        raise ForbiddenError("You can only manage companies you created")
    return company


def list_companies(ctx: ServiceContext) -> list[dict]:
    with store_errors(ctx.db, "listing companies"):
        rows = ctx.db.query(Company).order_by(Company.name.asc()).all()
    return [company_to_dict(c) for c in rows]


def get_company(ctx: ServiceContext, company_id: int) -> dict:
    return company_to_dict(_get_row(ctx, company_id))


def list_my_companies(ctx: ServiceContext, user_id: int) -> list[dict]:
    with store_errors(ctx.db, "listing my companies"):
        rows = (
            ctx.db.query(Company)
            .filter(Company.created_by == int(user_id))
            .order_by(Company.created_at.desc(), Company.id.desc())
            .all()
        )
    return [company_to_dict(c) for c in rows]


def create_company(ctx: ServiceContext, data: dict) -> dict:
    identity = ctx.require_role("employer", "admin")
    company = Company(**_clean(data, partial=False), created_by=identity.user_id)
    with store_errors(ctx.db, "creating company"):
        ctx.db.add(company)
        ctx.db.commit()
        ctx.db.refresh(company)
    logger.info("Company %s created by user %s", company.id, identity.user_id)
    return company_to_dict(company)


def update_company(ctx: ServiceContext, company_id: int, updates: dict) -> dict:
    company = _get_owned_row(ctx, company_id)
    for key, value in _clean(updates, partial=True).items():
        setattr(company, key, value)
    company.updated_at = utcnow()
    with store_errors(ctx.db, "updating company"):
        ctx.db.commit()
        ctx.db.refresh(company)
    return company_to_dict(company)


def delete_company(ctx: ServiceContext, company_id: int) -> None:
    """Delete a company. Jobs are not cascaded; the store's FK policy decides."""
    company = _get_owned_row(ctx, company_id)
    with store_errors(ctx.db, "deleting company"):
        ctx.db.delete(company)
        ctx.db.commit()
    logger.info("Company %s deleted", company_id)
