"""Retryable deletion of images that no longer belong to any record."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.image_cleanup import ImageCleanupTask
from storage import AbstractStorage, StoredImage, get_storage


def schedule_image_cleanup(public_ids: Iterable[str | None], source: str) -> list[ImageCleanupTask]:
    """Record pending deletions in the current transaction.

    Scheduling the same identifier twice reuses the existing task.
    """

    tasks = []
    for public_id in dict.fromkeys(pid for pid in public_ids if pid):
        task = ImageCleanupTask.query.filter_by(public_id=public_id).first()
        if task is None:
            task = ImageCleanupTask(public_id=public_id, source=source, status="pending")
            db.session.add(task)
        elif task.status == "done":
            task.status = "pending"
        tasks.append(task)
    return tasks


def run_image_cleanup(
    tasks: Iterable[ImageCleanupTask], storage: AbstractStorage | None = None
) -> dict:
    """Attempt the given deletions and persist their outcome.

    Failures are logged and left pending; this never raises for storage
    errors so the caller's primary operation is unaffected.
    """

    tasks = [task for task in tasks if task.status == "pending"]
    summary = {"successful": 0, "failed": 0}
    if not tasks:
        return summary

    logger = current_app.logger
    try:
        storage = storage or get_storage()
    except Exception as exc:
        logger.warning("Image cleanup skipped, storage unavailable: %s", exc)
        summary["failed"] = len(tasks)
        return summary

    for task in tasks:
        task.attempts = (task.attempts or 0) + 1
        try:
            storage.delete(task.public_id)
        except Exception as exc:
            task.last_error = str(exc)
            summary["failed"] += 1
            logger.warning("Failed to delete image %s: %s", task.public_id, exc)
        else:
            task.status = "done"
            task.last_error = None
            summary["successful"] += 1

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Could not record image cleanup results")

    logger.info(
        "Image cleanup: %d successful, %d failed", summary["successful"], summary["failed"]
    )
    return summary


def pending_cleanup_tasks(limit: int | None = None) -> list[ImageCleanupTask]:
    query = ImageCleanupTask.query.filter_by(status="pending").order_by(
        ImageCleanupTask.created_at.asc()
    )
    if limit:
        query = query.limit(limit)
    return query.all()


@contextmanager
def cleanup_on_failure(images: list[StoredImage], source: str) -> Iterator[None]:
    """Discard freshly stored ``images`` when the enclosed write does not complete.

    The list is read only after a failure, so callers may keep appending to
    it inside the block. The original error is re-raised.
    """

    try:
        yield
    except Exception:
        db.session.rollback()
        public_ids = [image.public_id for image in images if image.public_id]
        if public_ids:
            logger = current_app.logger
            logger.warning("Discarding %d uploaded image(s) from %s", len(public_ids), source)
            try:
                tasks = schedule_image_cleanup(public_ids, source)
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("Could not record cleanup for uploaded images %s", public_ids)
            else:
                run_image_cleanup(tasks)
        raise
