import pytest
from fastapi.testclient import TestClient

from upilink.main import create_app


@pytest.fixture(scope="module")
def client():
    app = create_app()
    with TestClient(app) as client:
        yield client


def test_healthz(client):
    response = client.get("/v1/healthz")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_version(client):
    data = client.get("/v1/version").json()
    assert data["name"] == "upi-link-service"
    assert data["default_currency"] == "INR"


def test_root_lists_links(client):
    data = client.get("/").json()
    assert data["status"] == "available"
    assert data["links"]["parse"].endswith("/v1/qr/parse")


def test_request_id_is_echoed(client):
    response = client.get("/v1/healthz", headers={"X-Request-Id": "abc-123"})
    assert response.headers["X-Request-Id"] == "abc-123"
