"""Storage backends."""

from flask import current_app

from .abstract_storage import AbstractStorage, StoredImage
from .cloudinary_storage import CloudinaryStorage
from .local_storage import LocalStorage

__all__ = [
    "AbstractStorage",
    "CloudinaryStorage",
    "LocalStorage",
    "StoredImage",
    "get_storage",
]


def get_storage() -> AbstractStorage:
    """Return the storage backend selected by ``STORAGE_BACKEND``."""

    config = current_app.config
    backend = config.get("STORAGE_BACKEND", "local")
    if backend == "cloudinary":
        return CloudinaryStorage(
            cloud_name=config["CLOUDINARY_CLOUD_NAME"],
            api_key=config["CLOUDINARY_API_KEY"],
            api_secret=config["CLOUDINARY_API_SECRET"],
            root_folder=config.get("CLOUDINARY_FOLDER", "adaayen"),
        )
    if backend == "local":
        return LocalStorage(config.get("UPLOAD_DIR"), config.get("UPLOAD_URL_PREFIX"))
    raise ValueError(f"Unknown storage backend: {backend}")
