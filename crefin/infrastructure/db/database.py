"""
Database configuration and session management.
"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import NullPool

from crefin.config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across FastAPI worker threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        poolclass=NullPool,
        echo=echo,
        connect_args=connect_args,
    )


# Create SQLAlchemy engine
engine = build_engine(settings.database_url, echo=settings.database_echo)

# Create SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Create declarative base
Base = declarative_base()

# SQLite and PostgreSQL wording of a unique key clash
UNIQUE_VIOLATION_MARKERS = ("UNIQUE constraint failed", "duplicate key value violates unique constraint")


def is_unique_violation(exc: IntegrityError, *names: str) -> bool:
    """
    Tell whether ``exc`` is a unique key clash.

    When ``names`` are given the clash must also mention one of them, either a
    constraint name (PostgreSQL) or a ``table.column`` (SQLite).
    """
    message = str(exc.orig)
    if not any(marker in message for marker in UNIQUE_VIOLATION_MARKERS):
        return False
    return not names or any(name in message for name in names)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_all_tables(bind: Engine = None) -> None:
    """Create every table registered on ``Base``. Used for development and tests."""
    # Models must be imported so their tables are registered
    from crefin.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
