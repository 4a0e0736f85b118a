import pytest

from backend.app.services import company_service
from backend.app.utils.error_handlers import ForbiddenError, NotFoundError, ValidationError


def test_create_and_list_companies(ctx_for, make_user):
    employer = make_user("employer")
    ctx = ctx_for(employer)
    company_service.create_company(ctx, {"name": "  Zeta Corp ", "website": ""})
    company_service.create_company(ctx, {"name": "Alpha Ltd", "description": "Widgets"})

    companies = company_service.list_companies(ctx_for(None))
    assert [c["name"] for c in companies] == ["Alpha Ltd", "Zeta Corp"]
    zeta = companies[1]
    assert zeta["website"] is None
    assert zeta["created_by"] == employer.id


def test_create_company_requires_name(ctx_for, make_user):
    with pytest.raises(ValidationError):
        company_service.create_company(ctx_for(make_user("employer")), {"name": "   "})


def test_candidates_cannot_create_companies(ctx_for, make_user):
    with pytest.raises(ForbiddenError):
        company_service.create_company(ctx_for(make_user("candidate")), {"name": "Nope Inc"})


def test_list_my_companies_is_scoped(ctx_for, make_user, make_company):
    mine = make_user("employer")
    theirs = make_user("employer")
    make_company(mine, name="Mine")
    make_company(theirs, name="Theirs")

    assert [c["name"] for c in company_service.list_my_companies(ctx_for(mine), mine.id)] == ["Mine"]


def test_update_company_by_creator(ctx_for, make_user, make_company):
    owner = make_user("employer")
    company = make_company(owner, name="Old Name")

    updated = company_service.update_company(ctx_for(owner), company.id, {"name": "New Name", "logo_url": "  "})
    assert updated["name"] == "New Name"
    assert updated["logo_url"] is None
    assert updated["updated_at"] is not None


def test_update_company_by_stranger_is_forbidden(ctx_for, make_user, make_company):
    company = make_company(make_user("employer"))
    with pytest.raises(ForbiddenError):
        company_service.update_company(ctx_for(make_user("employer")), company.id, {"name": "Mine now"})


def test_get_missing_company(ctx_for):
    with pytest.raises(NotFoundError):
        company_service.get_company(ctx_for(None), 31337)


def test_delete_company_without_jobs(ctx_for, make_user, make_company):
    owner = make_user("employer")
    company = make_company(owner)
    company_service.delete_company(ctx_for(owner), company.id)
    with pytest.raises(NotFoundError):
        company_service.get_company(ctx_for(None), company.id)


def test_delete_company_with_jobs_is_rejected(ctx_for, db_session, make_user, make_company, make_job):
    owner = make_user("employer")
    company = make_company(owner)
    job = make_job(owner, company)

    with pytest.raises(ValidationError):
        company_service.delete_company(ctx_for(owner), company.id)

    db_session.expire_all()
    assert company_service.get_company(ctx_for(None), company.id)["id"] == company.id
    from backend.app.models.job import Job

    assert db_session.query(Job).filter(Job.id == job.id).count() == 1
