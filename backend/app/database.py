import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres providers hand out `postgres://`, which SQLAlchemy no longer accepts.
    url = url.strip()
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


_db_url = _normalize_database_url(DATABASE_URL)
_is_sqlite = _db_url.startswith("sqlite")

_connect_args = {"check_same_thread": False, "timeout": 30} if _is_sqlite else {}
engine = create_engine(_db_url, pool_pre_ping=True, echo=SQL_ECHO, connect_args=_connect_args)

if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # noqa: ANN001
        # SQLite ignores FOREIGN KEY clauses unless asked per connection;
        # company deletes rely on them being enforced.
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON;")
        finally:
            cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """One session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    from . import models  # noqa: F401  (registers every table on Base.metadata)

    Base.metadata.create_all(bind=engine)
    logger.debug("Schema ensured for %s", sorted(Base.metadata.tables))
