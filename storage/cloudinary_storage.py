"""Cloudinary-backed image storage."""

from __future__ import annotations

from typing import IO

import cloudinary
import cloudinary.uploader

from .abstract_storage import AbstractStorage, StoredImage


UPLOAD_TRANSFORMATIONS = {
    "hero": [{"width": 1920, "height": 600, "crop": "fill"}, {"quality": "auto"}],
}
DEFAULT_TRANSFORMATION = [{"width": 1000, "height": 1000, "crop": "limit"}]


class CloudinaryStorageError(RuntimeError):
    """Raised when Cloudinary reports a failed deletion."""


class CloudinaryStorage(AbstractStorage):
    """Upload images to Cloudinary folders below a common root folder."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, root_folder: str):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.root_folder = root_folder.strip("/")

    def upload(self, file_obj: IO[bytes], filename: str, folder: str) -> StoredImage:
        result = cloudinary.uploader.upload(
            file_obj,
            folder=f"{self.root_folder}/{folder}",
            resource_type="image",
            transformation=UPLOAD_TRANSFORMATIONS.get(folder, DEFAULT_TRANSFORMATION),
        )
        return StoredImage(url=result["secure_url"], public_id=result["public_id"])

    def delete(self, public_id: str) -> bool:
        result = cloudinary.uploader.destroy(public_id)
        outcome = result.get("result")
        # "not found" means an earlier attempt already removed it.
        if outcome in ("ok", "not found"):
            return True
        raise CloudinaryStorageError(f"Deletion of {public_id} failed: {outcome}")
