import pytest
from fastapi.testclient import TestClient

from conselho.config import Settings
from conselho.main import create_app

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATA_DIR=str(tmp_path / "data"),
        UPLOADS_DIR=str(tmp_path / "uploads"),
        PUBLIC_DIR=str(tmp_path / "public"),
        JWT_SECRET="test-secret",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token(client):
    r = client.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert r.status_code == 200
    return r.json()["token"]


@pytest.fixture
def auth(token):
    return {"Authorization": f"Bearer {token}"}
