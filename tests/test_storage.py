"""Tests for the image storage backends."""

from __future__ import annotations

from io import BytesIO

import cloudinary.uploader
import pytest

from storage import CloudinaryStorage, LocalStorage, get_storage
from storage.cloudinary_storage import CloudinaryStorageError


def _cloudinary() -> CloudinaryStorage:
    return CloudinaryStorage("demo", "key", "secret", root_folder="adaayen")


def test_local_upload_returns_url_and_public_id(tmp_path):
    storage = LocalStorage(str(tmp_path), "/uploads")

    stored = storage.upload(BytesIO(b"data"), "My Photo.PNG", "posts")

    assert stored.public_id.startswith("posts/")
    assert stored.public_id.endswith(".png")
    assert stored.url == f"/uploads/{stored.public_id}"
    assert storage.exists(stored.public_id)


def test_cloudinary_upload_uses_folder_transformation(monkeypatch):
    calls = []

    def _upload(file_obj, **options):
        calls.append(options)
        return {"secure_url": "https://res.test/hero/a.png", "public_id": "adaayen/hero/a"}

    monkeypatch.setattr(cloudinary.uploader, "upload", _upload)

    stored = _cloudinary().upload(BytesIO(b"x"), "a.png", "hero")

    assert stored.url == "https://res.test/hero/a.png"
    assert stored.public_id == "adaayen/hero/a"
    assert calls[0]["folder"] == "adaayen/hero"
    assert calls[0]["transformation"][0]["width"] == 1920


@pytest.mark.parametrize("outcome", ["ok", "not found"])
def test_cloudinary_delete_is_idempotent(monkeypatch, outcome):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id: {"result": outcome})

    assert _cloudinary().delete("adaayen/fabrics/a") is True


def test_cloudinary_delete_failure_raises(monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id: {"result": "error"})

    with pytest.raises(CloudinaryStorageError):
        _cloudinary().delete("adaayen/fabrics/a")


def test_get_storage_selects_backend(app):
    app.config.update(
        STORAGE_BACKEND="cloudinary",
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key",
        CLOUDINARY_API_SECRET="secret",
    )
    with app.app_context():
        assert isinstance(get_storage(), CloudinaryStorage)

    app.config["STORAGE_BACKEND"] = "ftp"
    with app.app_context(), pytest.raises(ValueError):
        get_storage()
