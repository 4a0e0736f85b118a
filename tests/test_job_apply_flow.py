def _signup(client, *, email: str, user_type: str, first_name: str = "Test"):
    r = client.post(
        "/auth/signup",
        json={
            "email": email,
            "password": "Testpass123!",
            "user_type": user_type,
            "first_name": first_name,
            "last_name": "User",
        },
    )
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _employer_with_company(client, email: str = "hiring@example.com"):
    token = _signup(client, email=email, user_type="employer", first_name="Hiring")
    r = client.post("/companies", json={"name": "Initech"}, headers=_auth_headers(token))
    assert r.status_code == 201, r.text
    return token, r.json()["company"]["id"]


def _post_job(client, token: str, company_id: int, **overrides):
    body = {
        "title": "Backend Engineer",
        "company_id": str(company_id),
        "description": "FastAPI services",
        "requirements": "Python",
        "location": "Amsterdam",
        "status": "active",
    }
    body.update(overrides)
    return client.post("/jobs", json=body, headers=_auth_headers(token))


def test_employer_posts_job_and_gets_fresh_dashboard(client):
    token, company_id = _employer_with_company(client)
    r = _post_job(client, token, company_id, salary_min="", deadline="")
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["job"]["salary_min"] is None
    assert data["job"]["deadline"] is None
    assert data["dashboard"]["stats"]["active_jobs"] == 1
    assert data["dashboard"]["jobs"][0]["applications_count"] == 0


def test_public_job_list_and_detail(client):
    token, company_id = _employer_with_company(client)
    active = _post_job(client, token, company_id, title="Visible").json()["job"]
    _post_job(client, token, company_id, title="Hidden", status="draft")

    r = client.get("/jobs")
    assert r.status_code == 200, r.text
    titles = [j["title"] for j in r.json()["jobs"]]
    assert titles == ["Visible"]

    r = client.get("/jobs", params={"search": "fastapi", "location": "amster"})
    assert [j["id"] for j in r.json()["jobs"]] == [active["id"]]

    r = client.get(f"/jobs/{active['id']}")
    assert r.status_code == 200, r.text
    assert r.json()["job"]["posted_by_profile"]["first_name"] == "Hiring"

    assert client.get("/jobs/9999").status_code == 404


def test_candidate_applies_once(client):
    token, company_id = _employer_with_company(client)
    job = _post_job(client, token, company_id).json()["job"]
    cand = _signup(client, email="applicant@example.com", user_type="candidate", first_name="Grace")

    r = client.get(f"/jobs/{job['id']}/applied", headers=_auth_headers(cand))
    assert r.json()["already_applied"] is False

    r = client.post(
        "/applications",
        json={"job_id": job["id"], "cover_letter": "Hi!"},
        headers=_auth_headers(cand),
    )
    assert r.status_code == 201, r.text
    assert r.json()["application"]["status"] == "pending"

    r = client.get(f"/jobs/{job['id']}/applied", headers=_auth_headers(cand))
    assert r.json()["already_applied"] is True

    r = client.post("/applications", json={"job_id": job["id"]}, headers=_auth_headers(cand))
    assert r.status_code == 409, r.text

    mine = client.get("/applications/mine", headers=_auth_headers(cand)).json()["applications"]
    assert [a["job"]["title"] for a in mine] == ["Backend Engineer"]

    listed = client.get("/jobs").json()["jobs"]
    assert listed[0]["applications_count"] == 1


def test_employer_cannot_apply(client):
    token, company_id = _employer_with_company(client)
    job = _post_job(client, token, company_id).json()["job"]
    r = client.post("/applications", json={"job_id": job["id"]}, headers=_auth_headers(token))
    assert r.status_code == 403, r.text


def test_employer_moves_application_through_pipeline(client):
    token, company_id = _employer_with_company(client)
    job = _post_job(client, token, company_id).json()["job"]
    cand = _signup(client, email="pipeline@example.com", user_type="candidate", first_name="Linus")
    application_id = client.post(
        "/applications", json={"job_id": job["id"]}, headers=_auth_headers(cand)
    ).json()["application"]["id"]

    received = client.get("/applications/received", headers=_auth_headers(token)).json()["applications"]
    assert received[0]["applicant"]["first_name"] == "Linus"

    r = client.patch(
        f"/applications/{application_id}/status",
        json={"status": "reviewing", "notes": "Looks good"},
        headers=_auth_headers(token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["dashboard"]["stats"]["pending_review"] == 0

    r = client.patch(
        f"/applications/{application_id}/status",
        json={"status": "hired"},
        headers=_auth_headers(token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["dashboard"]["stats"]["hired"] == 1

    r = client.patch(
        f"/applications/{application_id}/status",
        json={"status": "pending"},
        headers=_auth_headers(token),
    )
    assert r.status_code == 409, r.text

    cand_dash = client.get("/dashboard/candidate", headers=_auth_headers(cand)).json()
    assert cand_dash["stats"]["hired"] == 1


def test_candidate_withdraws_and_dashboard_updates(client):
    token, company_id = _employer_with_company(client)
    job = _post_job(client, token, company_id).json()["job"]
    cand = _signup(client, email="leaver@example.com", user_type="candidate")
    application_id = client.post(
        "/applications", json={"job_id": job["id"]}, headers=_auth_headers(cand)
    ).json()["application"]["id"]

    r = client.post(f"/applications/{application_id}/withdraw", headers=_auth_headers(cand))
    assert r.status_code == 200, r.text
    assert r.json()["application"]["status"] == "withdrawn"
    assert r.json()["dashboard"]["stats"]["by_status"]["withdrawn"] == 1


def test_update_and_delete_job(client):
    token, company_id = _employer_with_company(client)
    job = _post_job(client, token, company_id, status="draft").json()["job"]

    r = client.patch(
        f"/jobs/{job['id']}",
        json={
            "title": "Staff Engineer",
            "company_id": company_id,
            "description": "FastAPI services",
            "requirements": "Python",
            "location": "Amsterdam",
            "status": "active",
            "salary_min": "90000",
            "salary_max": "120000",
        },
        headers=_auth_headers(token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["job"]["title"] == "Staff Engineer"
    assert r.json()["job"]["salary_max"] == 120000.0

    other = _signup(client, email="other-employer@example.com", user_type="employer")
    assert client.delete(f"/jobs/{job['id']}", headers=_auth_headers(other)).status_code == 403

    r = client.delete(f"/jobs/{job['id']}", headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    assert r.json()["dashboard"]["jobs"] == []
    assert client.get(f"/jobs/{job['id']}").status_code == 404


def test_my_jobs_include_drafts(client):
    token, company_id = _employer_with_company(client)
    _post_job(client, token, company_id, title="Draft", status="draft")
    _post_job(client, token, company_id, title="Live")

    mine = client.get("/jobs/mine", headers=_auth_headers(token)).json()["jobs"]
    assert {j["title"] for j in mine} == {"Draft", "Live"}


def test_patch_job_keeps_fields_not_sent(client):
    token, company_id = _employer_with_company(client)
    job = _post_job(
        client,
        token,
        company_id,
        salary_min="100",
        salary_max="200",
        remote_allowed=True,
        deadline="2030-06-30",
    ).json()["job"]

    r = client.patch(f"/jobs/{job['id']}", json={"title": "Principal Engineer"}, headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    patched = r.json()["job"]
    assert patched["title"] == "Principal Engineer"
    assert patched["status"] == "active"
    assert patched["salary_min"] == 100.0
    assert patched["salary_max"] == 200.0
    assert patched["remote_allowed"] is True
    assert patched["deadline"].startswith("2030-06-30")
    assert patched["location"] == job["location"]

    r = client.patch(f"/jobs/{job['id']}", json={"salary_min": ""}, headers=_auth_headers(token))
    assert r.status_code == 200, r.text
    assert r.json()["job"]["salary_min"] is None
    assert r.json()["job"]["salary_max"] == 200.0
