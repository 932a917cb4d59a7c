"""
Database configuration and session management
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel
import structlog

from gestia.core.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()


def build_engine(database_url: str, echo: bool = False):
    """Create an engine with engine-level timeouts for the configured backend"""
    url = make_url(database_url)
    timeout = settings.DATABASE_TIMEOUT_SECONDS

    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, echo=echo, **kwargs)

        # SQLite ignores ON DELETE rules unless foreign keys are switched on
        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args={
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={timeout * 1000}",
        },
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)


def init_db():
    """Initialize database tables"""
    # Import models so every table is registered on the metadata
    import gestia.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created")


def get_session() -> Generator[Session, None, None]:
    """Dependency to get database session"""
    with Session(engine, expire_on_commit=False) as session:
        yield session


@contextmanager
def transaction(session: Session):
    """Commit on success, roll back and re-raise on any error"""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
