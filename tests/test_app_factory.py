"""Tests for the Flask application factory."""
from __future__ import annotations


def test_health_endpoint_returns_ok(client, tmp_path):
    """The health endpoint should respond with an OK payload and create uploads dir."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    # uploads dir is configured via TestConfig in conftest and created on app init
    assert (tmp_path / "uploads").is_dir()


def test_blueprints_registered(app):
    """Application factory should register expected blueprints."""
    bps = set(app.blueprints.keys())
    required = {"auth", "fabrics", "posts", "cart", "customers", "admin", "settings"}
    assert required.issubset(bps)


def test_unknown_route_returns_json_404(client):
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    payload = response.get_json()
    assert payload["error"] == "Not Found"
    assert payload["request_id"]


def test_uploads_served_from_upload_dir(client, tmp_path):
    target = tmp_path / "uploads" / "fabrics"
    target.mkdir(parents=True)
    (target / "swatch.png").write_bytes(b"png-bytes")

    response = client.get("/uploads/fabrics/swatch.png")

    assert response.status_code == 200
    assert response.data == b"png-bytes"
