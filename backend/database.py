"""Database setup and session management."""

import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


@lru_cache
def get_engine():
    """Get or create the database engine (cached).

    SQLite connections are shared across FastAPI's worker threads, so
    ``check_same_thread`` is disabled for SQLite URLs.
    """
    connect_args = {}
    database_url = settings.DATABASE_URL

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,
    )
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def get_session_local():
    """Get a sessionmaker bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def init_db(engine=None) -> None:
    """Create any missing tables.

    Alembic owns schema changes; this only bootstraps a fresh database so
    the service works without running migrations first.
    """
    import models  # noqa: F401  (registers mappers on Base.metadata)

    Base.metadata.create_all(bind=engine or get_engine())


def get_db():
    """Dependency that provides a database session.

    Transaction conventions:
    - Read endpoints never commit.
    - ``OrderExecutionService`` owns its transaction: it opens it with
      ``BEGIN IMMEDIATE`` on SQLite and commits or rolls back both writes
      of a transition together.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
