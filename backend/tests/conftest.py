import os
import tempfile
from io import BytesIO

# settings are read at import time, so the test environment goes in first
os.environ.setdefault("ENV", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ACCESS_JWT_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="storefront-uploads-"))

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.db.models  # noqa: F401
from storefront.core.config import settings
from storefront.db.base import Base
from storefront.db.session import get_db
from storefront.main import app

PASSWORD = "Sup3r$ecret"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "upload"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(session_factory, upload_dir):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, *, name="Ada Admin", email="ada@example.com", password=PASSWORD):
    return client.post(
        "/api/v1/user/register",
        json={"name": name, "email": email, "password": password},
    )


def login(client, *, email="ada@example.com", password=PASSWORD):
    client.cookies.clear()
    return client.post("/api/v1/user/login", json={"email": email, "password": password})


@pytest.fixture
def auth_client(client):
    """A client holding the session cookies of a freshly registered user."""
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client


@pytest.fixture
def png_bytes():
    out = BytesIO()
    Image.new("RGB", (1600, 900), (200, 30, 30)).save(out, format="PNG")
    return out.getvalue()
