"""Tests for deferred image deletion."""

from __future__ import annotations

from io import BytesIO

import pytest

from models import db
from models.image_cleanup import ImageCleanupTask
from storage import LocalStorage
from utils.image_cleanup import (
    cleanup_on_failure,
    pending_cleanup_tasks,
    run_image_cleanup,
    schedule_image_cleanup,
)


class _FlakyStorage:
    def __init__(self, failing):
        self.failing = set(failing)
        self.deleted = []

    def delete(self, public_id):
        if public_id in self.failing:
            raise RuntimeError("timeout")
        self.deleted.append(public_id)
        return True


def test_schedule_skips_blank_and_duplicate_ids(app):
    with app.app_context():
        tasks = schedule_image_cleanup(["a.png", None, "", "a.png", "b.png"], source="fabric")
        db.session.commit()

        assert [task.public_id for task in tasks] == ["a.png", "b.png"]
        assert ImageCleanupTask.query.count() == 2


def test_failed_deletions_stay_pending_until_reconciled(app):
    with app.app_context():
        tasks = schedule_image_cleanup(["ok.png", "bad.png"], source="post")
        db.session.commit()

        storage = _FlakyStorage(failing={"bad.png"})
        summary = run_image_cleanup(tasks, storage=storage)

        assert summary == {"successful": 1, "failed": 1}
        pending = pending_cleanup_tasks()
        assert [task.public_id for task in pending] == ["bad.png"]
        assert pending[0].last_error == "timeout"

        retry = run_image_cleanup(pending, storage=_FlakyStorage(failing=()))

        assert retry == {"successful": 1, "failed": 0}
        assert pending_cleanup_tasks() == []
        task = ImageCleanupTask.query.filter_by(public_id="bad.png").one()
        assert task.attempts == 2
        assert task.last_error is None


def test_rescheduling_a_done_task_reopens_it(app):
    with app.app_context():
        tasks = schedule_image_cleanup(["again.png"], source="hero")
        db.session.commit()
        run_image_cleanup(tasks, storage=_FlakyStorage(failing=()))

        reopened = schedule_image_cleanup(["again.png"], source="hero")

        assert reopened[0].status == "pending"
        assert ImageCleanupTask.query.count() == 1


def test_local_storage_delete_is_idempotent(tmp_path):
    storage = LocalStorage(str(tmp_path), "/uploads")
    target = tmp_path / "fabrics" / "x.png"
    target.parent.mkdir()
    target.write_bytes(b"x")

    assert storage.delete("fabrics/x.png") is True
    assert storage.delete("fabrics/x.png") is True
    assert not target.exists()


def test_local_storage_rejects_path_escape(tmp_path):
    storage = LocalStorage(str(tmp_path / "uploads"), "/uploads")

    with pytest.raises(ValueError):
        storage.delete("../outside.png")


class _SecondUploadFails:
    def __init__(self, storage):
        self.storage = storage
        self.uploads = 0

    def upload(self, file_obj, filename, folder):
        self.uploads += 1
        if self.uploads == 2:
            raise RuntimeError("upload interrupted")
        return self.storage.upload(file_obj, filename, folder)


def test_failed_write_discards_stored_images(app):
    with app.app_context():
        storage = LocalStorage(app.config["UPLOAD_DIR"], "/uploads")
        stored = [storage.upload(BytesIO(b"draft"), "draft.png", "fabrics")]

        with pytest.raises(RuntimeError):
            with cleanup_on_failure(stored, source="fabric"):
                raise RuntimeError("insert failed")

        assert not storage.exists(stored[0].public_id)
        task = ImageCleanupTask.query.one()
        assert task.public_id == stored[0].public_id
        assert task.status == "done"


def test_successful_write_schedules_nothing(app):
    with app.app_context():
        with cleanup_on_failure([], source="fabric"):
            pass

        assert ImageCleanupTask.query.count() == 0


def test_interrupted_upload_batch_leaves_no_files(
    app, client, make_user, auth_header, tmp_path, monkeypatch
):
    headers = auth_header(make_user("admin@example.com", role="admin"))
    flaky = _SecondUploadFails(LocalStorage(app.config["UPLOAD_DIR"], "/uploads"))
    monkeypatch.setattr("utils.uploads.get_storage", lambda: flaky)

    response = client.post(
        "/fabrics",
        data={
            "name": "Ikat",
            "price": "450",
            "fabricType": "Cotton",
            "images": [
                (BytesIO(b"one"), "one.png", "image/png"),
                (BytesIO(b"two"), "two.png", "image/png"),
            ],
        },
        content_type="multipart/form-data",
        headers=headers,
    )

    assert response.status_code == 500
    assert flaky.uploads == 2
    assert list((tmp_path / "uploads" / "fabrics").iterdir()) == []
    with app.app_context():
        assert [task.source for task in ImageCleanupTask.query.all()] == ["fabrics"]
