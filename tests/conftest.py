# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from Data.database import init_db, make_engine, make_session_factory
from presentation import create_app
from services import auth_service


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Minimum bcrypt cost; the default makes every registration slow."""
    monkeypatch.setattr(auth_service, "BCRYPT_ROUNDS", 4)


@pytest.fixture()
def db() -> Session:
    """A session over a fresh in-memory database."""
    engine = make_engine("sqlite://")
    init_db(engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client() -> TestClient:
    app = create_app("sqlite://")
    with TestClient(app) as c:
        yield c
