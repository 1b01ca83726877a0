"""
Shared test fixtures. Environment is set before the app is imported so
settings, the engine and the uploads mount all point at a temp directory.
"""
import os
import shutil
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="srilanka-explorer-tests-")
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["UPLOAD_ROOT"] = os.path.join(_tmp_dir, "uploads")
os.environ["FRONTEND_URL"] = "https://srilanka-explorer.test"
os.environ["IMAGEKIT_PUBLIC_KEY"] = ""
os.environ["IMAGEKIT_PRIVATE_KEY"] = ""
os.environ["IMAGEKIT_URL_ENDPOINT"] = ""

import pytest
from fastapi.testclient import TestClient

import app.models  # noqa: F401
from app.main import app
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.api.dependencies import get_image_manager
from app.services.image_service import AssetLocator, ImageAssetManager


class RecordingLocator(AssetLocator):
    """Locator that records every URL it is asked to delete; optionally fails some."""

    name = "recording"

    def __init__(self, fail_on=()):
        self.attempted = []
        self.fail_on = set(fail_on)

    def matches(self, url):
        return True

    def delete(self, url):
        self.attempted.append(url)
        if url in self.fail_on:
            raise RuntimeError(f"storage unavailable for {url}")
        return True


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def locator():
    return RecordingLocator()


@pytest.fixture
def client(locator):
    app.dependency_overrides[get_image_manager] = lambda: ImageAssetManager([locator])
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return (user, token)."""
    def _register(name="Alice", username="alice1", password="secret1"):
        response = client.post(
            "/api/auth/register",
            json={
                "name": name,
                "username": username,
                "password": password,
                "confirmPassword": password,
            }
        )
        assert response.status_code == 201, response.json()
        data = response.json()["data"]
        return data["user"], data["token"]
    return _register


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_tmp_dir, ignore_errors=True)
