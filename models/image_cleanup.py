"""Pending storage-blob deletions."""

from . import db, utcnow


CLEANUP_STATUSES = ("pending", "done")


class ImageCleanupTask(db.Model):
    """One blob that should be removed from image storage.

    Rows are written in the same transaction that drops the owning record,
    so a blob whose deletion failed can still be reconciled later.
    """

    __tablename__ = "image_cleanup_tasks"

    id = db.Column(db.Integer, primary_key=True)
    public_id = db.Column(db.String(512), nullable=False, unique=True)
    source = db.Column(db.String(64), nullable=False)
    status = db.Column(
        db.Enum(*CLEANUP_STATUSES, name="image_cleanup_status_enum"),
        nullable=False,
        default="pending",
        index=True,
    )
    attempts = db.Column(db.Integer, nullable=False, default=0)
    last_error = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return (
            f"<ImageCleanupTask id={self.id} public_id={self.public_id} status={self.status}>"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "publicId": self.public_id,
            "source": self.source,
            "status": self.status,
            "attempts": self.attempts,
            "lastError": self.last_error,
        }
