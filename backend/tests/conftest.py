import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from messmeal import main
from messmeal.api.deps import require_user
from messmeal.config import Settings
from messmeal.context import build_context
from messmeal.services.auth import AuthUser
from messmeal.services.catalog import StaticCatalogProvider
from messmeal.storage import db as db_module

API_BASE_URL = "http://api.test"


class FakeRedis:
    """In-memory stand-in for the handful of Redis calls the preference cache makes."""

    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.closed = False

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    def close(self):
        self.closed = True


@pytest.fixture(name="catalog")
def catalog_fixture():
    return StaticCatalogProvider().load()


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="redis")
def redis_fixture():
    return FakeRedis()


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(api_base_url=API_BASE_URL, catalog_source="static", redis_url="redis://unused:6379/0")


@pytest.fixture(name="context")
def context_fixture(settings, redis):
    http = httpx.Client(base_url=API_BASE_URL)
    context = build_context(settings, http=http, redis_client=redis)
    yield context
    context.close()


@pytest.fixture(name="user")
def user_fixture():
    return AuthUser(id="user-1", name="Test User", username="tester", email="t@example.com", role="admin")


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine, context, user):
    def _get_session_override():
        return Session(engine)

    monkeypatch.setattr(db_module, "engine", engine)
    monkeypatch.setattr(db_module, "get_session", _get_session_override)
    main.app.state.context = context
    main.app.dependency_overrides[require_user] = lambda: user

    client = TestClient(main.app)
    yield client
    main.app.dependency_overrides.clear()
    main.app.state.context = None


@pytest.fixture(name="login")
def login_fixture(client):
    """Switch the user the API sees for the rest of the test."""

    def _login(user):
        main.app.dependency_overrides[require_user] = lambda: user

    return _login
