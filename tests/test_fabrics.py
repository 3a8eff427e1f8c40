"""Tests for the fabric catalog endpoints."""

from __future__ import annotations

from io import BytesIO

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import db
from models.fabric import Fabric
from models.image_cleanup import ImageCleanupTask
from models.post import Post
from models.user import User


class _FailingStorage:
    def delete(self, public_id):
        raise RuntimeError("storage offline")


@pytest.fixture()
def admin(make_user, auth_header) -> dict:
    return auth_header(make_user("admin@example.com", role="admin"))


def _fabric_form(**overrides) -> dict:
    form = {"name": "Banarasi Silk", "price": "1299.50", "fabricType": "Silk", "color": "Maroon"}
    form.update(overrides)
    return form


def test_list_is_public_and_paginated(client, make_fabric):
    for index in range(3):
        make_fabric(f"Fabric {index}")

    response = client.get("/fabrics?limit=2")

    assert response.status_code == 200
    payload = response.get_json()
    assert len(payload["fabrics"]) == 2
    assert payload["total"] == 3
    assert payload["pages"] == 2
    assert payload["page"] == 1

    second = client.get("/fabrics?limit=2&page=2").get_json()
    assert len(second["fabrics"]) == 1


def test_list_filters(client, make_fabric):
    make_fabric("Indigo Cotton", fabric_type="Cotton")
    make_fabric("Raw Silk", fabric_type="Silk", in_stock=False)

    by_type = client.get("/fabrics?type=Silk").get_json()["fabrics"]
    in_stock = client.get("/fabrics?inStock=true").get_json()["fabrics"]
    search = client.get("/fabrics?q=indigo").get_json()["fabrics"]

    assert [f["name"] for f in by_type] == ["Raw Silk"]
    assert [f["name"] for f in in_stock] == ["Indigo Cotton"]
    assert [f["name"] for f in search] == ["Indigo Cotton"]


def test_list_rejects_unknown_type(client):
    assert client.get("/fabrics?type=Plastic").status_code == 422


def test_get_fabric(client, make_fabric):
    fabric_id = make_fabric("Linen Weave", price="45.00")

    response = client.get(f"/fabrics/{fabric_id}")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["name"] == "Linen Weave"
    assert payload["price"] == 45.0
    assert client.get("/fabrics/999").status_code == 404


def test_create_requires_admin(client, make_user, auth_header):
    creator = auth_header(make_user("creator@example.com", role="creator"))

    response = client.post("/fabrics", json={**_fabric_form(), "imageUrl": "https://img.test/a.png"}, headers=creator)

    assert response.status_code == 403


def test_create_with_uploaded_images(app, client, admin, tmp_path):
    data = _fabric_form()
    data["images"] = [
        (BytesIO(b"first"), "front.png", "image/png"),
        (BytesIO(b"second"), "back.jpg", "image/jpeg"),
    ]

    response = client.post("/fabrics", data=data, content_type="multipart/form-data", headers=admin)

    assert response.status_code == 201
    fabric = response.get_json()["fabric"]
    assert fabric["price"] == 1299.5
    assert len(fabric["images"]) == 2
    assert fabric["imageUrl"] == fabric["images"][0]
    assert fabric["imageUrl"].startswith("/uploads/fabrics/")
    public_id = fabric["imagesMeta"][0]["publicId"]
    assert (tmp_path / "uploads" / public_id).read_bytes() == b"first"
    assert client.get(fabric["imageUrl"]).data == b"first"

    with app.app_context():
        admin_user = User.query.filter_by(email="admin@example.com").one()
        history = admin_user.admin_profile.action_history
        assert history[-1]["action"] == "create_fabric"
        assert history[-1]["targetId"] == fabric["id"]


def test_create_accepts_image_url(client, admin):
    response = client.post(
        "/fabrics", json={**_fabric_form(), "imageUrl": "https://img.test/silk.png"}, headers=admin
    )

    assert response.status_code == 201
    fabric = response.get_json()["fabric"]
    assert fabric["imageUrl"] == "https://img.test/silk.png"
    assert fabric["imagesMeta"] == [{"url": "https://img.test/silk.png", "publicId": None}]


def test_create_requires_an_image(client, admin):
    response = client.post("/fabrics", json=_fabric_form(), headers=admin)

    assert response.status_code == 400
    assert response.get_json()["code"] == "MissingImage"


def test_create_rejects_non_image_upload(client, admin, tmp_path):
    data = _fabric_form()
    data["images"] = (BytesIO(b"MZ"), "virus.exe", "application/octet-stream")

    response = client.post("/fabrics", data=data, content_type="multipart/form-data", headers=admin)

    assert response.status_code == 422
    assert "images[0]" in response.get_json()["errors"]
    assert not (tmp_path / "uploads" / "fabrics").exists()


def test_create_validates_fields(client, admin):
    response = client.post(
        "/fabrics",
        json={"name": "", "price": "-1", "fabricType": "Plastic", "imageUrl": "https://img.test/x.png"},
        headers=admin,
    )

    assert response.status_code == 422
    assert set(response.get_json()["errors"]) == {"name", "price", "fabricType"}


def test_create_rejects_wrongly_typed_fields(client, admin):
    response = client.post(
        "/fabrics",
        json={
            **_fabric_form(name=5, price="1e400", color=["red"]),
            "imageUrl": "https://img.test/x.png",
        },
        headers=admin,
    )

    assert response.status_code == 422
    assert set(response.get_json()["errors"]) == {"name", "price", "color"}


def test_create_rejects_non_string_image_url(client, admin):
    response = client.post("/fabrics", json={**_fabric_form(), "imageUrl": 5}, headers=admin)

    assert response.status_code == 422
    assert "imageUrl" in response.get_json()["errors"]


def test_failed_create_discards_uploaded_images(app, client, admin, tmp_path, monkeypatch):
    real_commit = Session.commit
    calls = {"count": 0}

    def _failing_first_commit(session):
        calls["count"] += 1
        if calls["count"] == 1:
            raise SQLAlchemyError("database went away")
        return real_commit(session)

    monkeypatch.setattr(Session, "commit", _failing_first_commit)
    data = _fabric_form()
    data["images"] = (BytesIO(b"orphan"), "front.png", "image/png")

    response = client.post("/fabrics", data=data, content_type="multipart/form-data", headers=admin)

    assert response.status_code == 500
    assert response.get_json()["code"] == "Internal"
    assert list((tmp_path / "uploads" / "fabrics").iterdir()) == []
    with app.app_context():
        assert Fabric.query.count() == 0
        task = ImageCleanupTask.query.one()
        assert task.public_id.startswith("fabrics/")
        assert task.source == "fabric"
        assert task.status == "done"


def test_update_appends_images(client, admin, make_fabric):
    fabric_id = make_fabric()
    data = {"price": "120", "inStock": "false", "images": (BytesIO(b"new"), "extra.webp", "image/webp")}

    response = client.put(
        f"/fabrics/{fabric_id}", data=data, content_type="multipart/form-data", headers=admin
    )

    assert response.status_code == 200
    fabric = response.get_json()["fabric"]
    assert fabric["price"] == 120.0
    assert fabric["inStock"] is False
    assert len(fabric["images"]) == 2
    assert fabric["imageUrl"] == fabric["images"][0]


def test_update_missing_fabric(client, admin):
    assert client.put("/fabrics/999", json={"price": 1}, headers=admin).status_code == 404


def test_delete_cleans_up_images(app, client, admin, tmp_path):
    upload = client.post(
        "/fabrics",
        data={**_fabric_form(), "images": (BytesIO(b"img"), "a.png", "image/png")},
        content_type="multipart/form-data",
        headers=admin,
    ).get_json()["fabric"]
    stored = tmp_path / "uploads" / upload["imagesMeta"][0]["publicId"]
    assert stored.exists()

    response = client.delete(f"/fabrics/{upload['id']}", headers=admin)

    assert response.status_code == 200
    assert response.get_json()["imageCleanup"] == {"successful": 1, "failed": 0}
    assert not stored.exists()
    assert client.get(f"/fabrics/{upload['id']}").status_code == 404


def test_delete_succeeds_when_storage_fails(app, client, admin, make_fabric, monkeypatch):
    fabric_id = make_fabric(public_id="fabrics/lost.png")
    monkeypatch.setattr("utils.image_cleanup.get_storage", lambda: _FailingStorage())

    response = client.delete(f"/fabrics/{fabric_id}", headers=admin)

    assert response.status_code == 200
    assert response.get_json()["imageCleanup"] == {"successful": 0, "failed": 1}
    with app.app_context():
        assert db.session.get(Fabric, fabric_id) is None
        task = ImageCleanupTask.query.filter_by(public_id="fabrics/lost.png").one()
        assert task.status == "pending"
        assert task.attempts == 1
        assert "storage offline" in task.last_error


def test_delete_clears_post_reference(app, client, admin, make_user, make_fabric):
    fabric_id = make_fabric()
    creator_id = make_user("creator@example.com", role="creator")
    with app.app_context():
        post = Post(
            creator_id=creator_id,
            title="Kurta",
            fabric_id=fabric_id,
            image_url="https://img.test/kurta.png",
        )
        db.session.add(post)
        db.session.commit()
        post_id = post.id

    assert client.delete(f"/fabrics/{fabric_id}", headers=admin).status_code == 200

    with app.app_context():
        post = db.session.get(Post, post_id)
        assert post is not None
        assert post.fabric_id is None


def test_delete_without_images_is_a_noop_cleanup(client, admin, make_fabric):
    fabric_id = make_fabric()

    response = client.delete(f"/fabrics/{fabric_id}", headers=admin)

    assert response.status_code == 200
    assert response.get_json()["imageCleanup"] == {"successful": 0, "failed": 0}
