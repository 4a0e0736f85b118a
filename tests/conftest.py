import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker


# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Config requires these at import time; set them before anything imports backend.app.
os.environ["DISABLE_DOTENV"] = "1"
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+pysqlite:///{Path(tempfile.mkdtemp(prefix='jobboard-')) / 'bootstrap.sqlite3'}",
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")


@pytest.fixture()
def test_db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.sqlite3"


@pytest.fixture()
def app(test_db_path: Path) -> FastAPI:
    """
    Create a FastAPI app wired to a fresh temporary SQLite DB.

    We intentionally do NOT serve `app.main.app` so the startup hook never
    touches the configured DATABASE_URL.
    """
    from backend.app import database as db

    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the shared database module so router dependencies use the test DB.
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    # Import models so Base metadata is populated, then create tables.
    from backend.app import models  # noqa: F401

    db.Base.metadata.create_all(bind=engine)

    from backend.app.api import application as application_api
    from backend.app.api import auth as auth_api
    from backend.app.api import company as company_api
    from backend.app.api import dashboard as dashboard_api
    from backend.app.api import interview as interview_api
    from backend.app.api import job as job_api
    from backend.app.api import profile as profile_api
    from backend.app.main import register_exception_handlers

    fastapi_app = FastAPI()
    for router_module in (auth_api, profile_api, company_api, job_api, application_api, dashboard_api, interview_api):
        fastapi_app.include_router(router_module.router)
    register_exception_handlers(fastapi_app)

    yield fastapi_app

    engine.dispose()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    from backend.app import database

    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def ctx_for(db_session):
    """Build a ServiceContext acting as `user` (or anonymous when None)."""
    from backend.app.services.context import Identity, ServiceContext

    def _ctx(user=None) -> ServiceContext:
        if user is None:
            return ServiceContext(db=db_session)
        return ServiceContext(db=db_session, identity=Identity(user_id=user.id, role=user.role))

    return _ctx


@pytest.fixture()
def make_user(db_session):
    from backend.app.models.user import User
    from backend.app.models.user_profile import UserProfile

    counter = {"n": 0}

    def _make(role: str = "candidate", email: str | None = None, first_name: str = "Test", last_name: str = "User"):
        counter["n"] += 1
        user = User(
            email=email or f"{role}{counter['n']}@example.com",
            password="not-a-real-hash",
            role=role,
        )
        db_session.add(user)
        db_session.flush()
        db_session.add(UserProfile(user_id=user.id, user_type=role, first_name=first_name, last_name=last_name))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def make_company(db_session):
    from backend.app.models.company import Company

    def _make(owner, name: str = "Acme"):
        company = Company(name=name, created_by=owner.id)
        db_session.add(company)
        db_session.commit()
        db_session.refresh(company)
        return company

    return _make


@pytest.fixture()
def make_job(db_session):
    from backend.app.models.job import Job

    def _make(owner, company, **overrides):
        values = {
            "title": "Backend Engineer",
            "description": "Build APIs with Python",
            "requirements": "3+ years Python",
            "location": "Berlin",
            "remote_allowed": False,
            "employment_type": "full_time",
            "experience_level": "mid",
            "status": "active",
        }
        values.update(overrides)
        job = Job(company_id=company.id, posted_by=owner.id, **values)
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _make


@pytest.fixture()
def make_application(db_session):
    from backend.app.models.application import Application

    def _make(job, applicant, status: str = "pending"):
        application = Application(job_id=job.id, applicant_id=applicant.id, status=status)
        db_session.add(application)
        db_session.commit()
        db_session.refresh(application)
        return application

    return _make
