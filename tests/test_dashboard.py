import pytest

from backend.app.services import dashboard
from backend.app.utils.error_handlers import ForbiddenError


def test_count_by_status_is_zero_filled():
    rows = [{"status": "pending"}, {"status": "pending"}, {"status": "hired"}]
    counts = dashboard.count_by_status(rows, ["pending", "reviewing", "hired"])
    assert counts == {"pending": 2, "reviewing": 0, "hired": 1}


def test_group_by_status_keeps_empty_buckets():
    grouped = dashboard.group_by_status([{"id": 1, "status": "interview"}], ["pending", "interview"])
    assert grouped["pending"] == []
    assert [r["id"] for r in grouped["interview"]] == [1]


def test_employer_dashboard_stats(ctx_for, make_user, make_company, make_job, make_application):
    employer = make_user("employer")
    company = make_company(employer)
    active = make_job(employer, company, title="Active", status="active")
    make_job(employer, company, title="Draft", status="draft")

    make_application(active, make_user("candidate"), status="pending")
    make_application(active, make_user("candidate"), status="hired")

    data = dashboard.employer_dashboard(ctx_for(employer))
    stats = data["stats"]
    assert stats["active_jobs"] == 1
    assert stats["total_applications"] == 2
    assert stats["pending_review"] == 1
    assert stats["hired"] == 1
    assert stats["jobs_by_status"]["draft"] == 1
    assert len(data["jobs"]) == 2
    assert len(data["grouped_applications"]["hired"]) == 1


def test_employer_dashboard_without_jobs(ctx_for, make_user):
    data = dashboard.employer_dashboard(ctx_for(make_user("employer")))
    assert data["jobs"] == []
    assert data["applications"] == []
    assert data["stats"]["active_jobs"] == 0
    assert data["stats"]["total_applications"] == 0


def test_candidate_dashboard_stats(ctx_for, make_user, make_company, make_job, make_application):
    employer = make_user("employer")
    company = make_company(employer)
    candidate = make_user("candidate")
    make_application(make_job(employer, company, title="One"), candidate, status="reviewing")
    make_application(make_job(employer, company, title="Two"), candidate, status="interview")
    make_application(make_job(employer, company, title="Three"), candidate, status="rejected")

    data = dashboard.candidate_dashboard(ctx_for(candidate))
    stats = data["stats"]
    assert stats["total"] == 3
    assert stats["reviewing"] == 1
    assert stats["interview"] == 1
    assert stats["hired"] == 0
    assert stats["by_status"]["rejected"] == 1
    assert [a["job"]["title"] for a in data["grouped"]["interview"]] == ["Two"]


def test_dashboards_are_role_scoped(ctx_for, make_user):
    with pytest.raises(ForbiddenError):
        dashboard.candidate_dashboard(ctx_for(make_user("employer")))
    with pytest.raises(ForbiddenError):
        dashboard.employer_dashboard(ctx_for(make_user("candidate")))
