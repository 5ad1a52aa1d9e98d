"""
Database engine, session, and utilities for Taskdesk.
Uses SQLAlchemy; SQLite by default.

Nothing here holds a process-wide session: each application builds its own
engine and session factory and keeps them on ``app.state``.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request
import os
from datetime import datetime, timezone

# Resolve project root: go up from src/Data/ to project root
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__),
                                            "..", ".."))
DB_PATH = os.path.join(PROJECT_ROOT, "taskdesk.db")
DATABASE_URL = os.getenv("TASKDESK_DATABASE_URL", f"sqlite:///{DB_PATH}")

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def make_engine(url: str | None = None) -> Engine:
    """Build an engine for ``url`` (defaults to TASKDESK_DATABASE_URL)."""
    url = url or DATABASE_URL
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every checkout sees an empty db
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=False, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine):
    """Create all tables if they don't exist."""
    # Import models so they are registered on Base.metadata
    from Data import models  # noqa: F401

    Base.metadata.create_all(engine)


def get_db(request: Request):
    """Get a database session bound to the requesting application."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
