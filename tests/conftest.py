"""Shared fixtures for the console test-suite."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
for variable in ("PROJECT_API_KEY", "PROJECT_AUTH_DOMAIN", "PROJECT_ID", "INITIAL_AUTH_TOKEN"):
    os.environ.pop(variable, None)

from govconsole.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from sqlalchemy.orm import sessionmaker  # noqa: E402

from govconsole.infrastructure.database import (  # noqa: E402
    create_database_engine,
    initialize_database,
)
from govconsole.infrastructure.document_store import DocumentStore  # noqa: E402


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def db_engine():
    """Return a private in-memory database with the schema applied."""

    engine = create_database_engine("sqlite://")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def store(db_engine) -> DocumentStore:
    return DocumentStore(sessionmaker(autocommit=False, autoflush=False, bind=db_engine))


@pytest.fixture()
def override_settings(monkeypatch):
    """Return a callable that replaces environment settings for one test."""

    def apply(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key.upper(), value)
        reset_settings_cache()

    yield apply
    reset_settings_cache()


@pytest.fixture()
def app(store):
    """Return an application whose routes use the private test store."""

    from govconsole.interfaces.api.dependencies import get_document_store
    from main import create_app

    application = create_app()
    application.dependency_overrides[get_document_store] = lambda: store
    return application


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers(client) -> dict[str, str]:
    """Sign in anonymously and return the bearer headers of the session."""

    response = client.post("/auth/anonymous")
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
