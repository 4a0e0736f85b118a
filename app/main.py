"""Run the job board API from the repo root:

    uvicorn app.main:app --reload
"""

from backend.app.main import app  # noqa: F401
