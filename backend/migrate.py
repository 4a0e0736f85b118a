#!/usr/bin/env python3
"""
Bring an existing job board database up to the current schema.

`create_all` creates missing tables but never alters existing ones, so the
columns and index added after the first release are patched in here.
"""

import sys
from pathlib import Path

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from app.database import init_db, Base, engine

EXPECTED_TABLES = (
    "users",
    "user_profiles",
    "companies",
    "jobs",
    "applications",
    "interviews",
    "revoked_tokens",
)

LATE_JOB_COLUMNS = {
    "remote_allowed": "BOOLEAN NOT NULL DEFAULT 0",
    "deadline": "TIMESTAMP",
    "updated_at": "TIMESTAMP",
}

APPLICATION_UNIQUE_INDEX = "uq_applications_job_applicant"


def _add_late_job_columns(inspector) -> list[str]:
    present = {c["name"] for c in inspector.get_columns("jobs")}
    added = []
    for name, ddl_type in LATE_JOB_COLUMNS.items():
        if name in present:
            continue
        try:
            with engine.begin() as conn:
                conn.execute(text(f"ALTER TABLE jobs ADD COLUMN {name} {ddl_type}"))
        except SQLAlchemyError as e:
            print(f"✗ jobs.{name}: {e}")
            continue
        added.append(name)
    return added


def _ensure_application_unique_index(inspector) -> None:
    # Existing duplicate (job_id, applicant_id) rows make this fail; the
    # service-level lookup still blocks new duplicates.
    names = {i.get("name") for i in inspector.get_indexes("applications")}
    names |= {u.get("name") for u in inspector.get_unique_constraints("applications")}
    if APPLICATION_UNIQUE_INDEX in names:
        print(f"✓ {APPLICATION_UNIQUE_INDEX} already present")
        return
    try:
        with engine.begin() as conn:
            conn.execute(text(
                f"CREATE UNIQUE INDEX {APPLICATION_UNIQUE_INDEX} ON applications (job_id, applicant_id)"
            ))
    except SQLAlchemyError as e:
        print(f"⚠ Could not create {APPLICATION_UNIQUE_INDEX}: {e}")
        return
    print(f"✓ Created {APPLICATION_UNIQUE_INDEX}")


def migrate() -> bool:
    init_db()
    print(f"✓ Tables created on {engine.dialect.name}")

    inspector = inspect(engine)
    added = _add_late_job_columns(inspector)
    print(f"✓ Added jobs columns: {', '.join(added)}" if added else "✓ jobs columns up to date")

    _ensure_application_unique_index(inspector)

    missing = [t for t in EXPECTED_TABLES if t not in Base.metadata.tables]
    if missing:
        print(f"✗ Models not registered for: {', '.join(missing)}")
        return False
    return True


if __name__ == "__main__":
    sys.exit(0 if migrate() else 1)
