from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..utils.error_handlers import handle_database_error


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def store_errors(db: Session, operation: str):
    """Roll back and re-raise store failures as AppError subclasses."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, operation) from e
