"""Image upload handling for multipart requests."""

from __future__ import annotations

import os

from flask import Request, current_app
from werkzeug.datastructures import FileStorage

from storage import StoredImage, get_storage
from utils.errors import MissingImage, ValidationError
from utils.image_cleanup import cleanup_on_failure
from utils.request_validation import parse_str


IMAGE_FIELD = "images"


def _image_files(req: Request) -> list[FileStorage]:
    return [
        file
        for file in req.files.getlist(IMAGE_FIELD)
        if isinstance(file, FileStorage) and file.filename
    ]


def _validate_image(file: FileStorage, index: int, errors: dict) -> None:
    field = f"{IMAGE_FIELD}[{index}]"
    extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    allowed = current_app.config.get("ALLOWED_IMAGE_TYPES") or ()
    if not (file.mimetype or "").startswith("image/") or extension not in allowed:
        errors[field] = "Not an image! Allowed types: {}.".format(", ".join(sorted(allowed)))
        return

    max_mb = int(current_app.config.get("MAX_FILE_SIZE_MB", 10))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_mb * 1024 * 1024:
        errors[field] = f"File exceeds the maximum upload size of {max_mb}MB."


def collect_images(req: Request, data: dict, folder: str, *, required: bool) -> list[StoredImage]:
    """Validate and store uploaded images, falling back to a bare ``imageUrl``.

    Nothing is uploaded unless every file passes validation.
    """

    files = _image_files(req)
    max_files = int(current_app.config.get("MAX_FILES", 6))
    if len(files) > max_files:
        raise ValidationError({IMAGE_FIELD: f"At most {max_files} images may be uploaded."})

    errors: dict = {}
    for index, file in enumerate(files):
        _validate_image(file, index, errors)
    if errors:
        raise ValidationError(errors)

    if files:
        storage = get_storage()
        stored: list[StoredImage] = []
        with cleanup_on_failure(stored, source=folder):
            for file in files:
                stored.append(storage.upload(file, file.filename, folder))
        current_app.logger.info("Stored %d image(s) in %s", len(stored), folder)
        return stored

    legacy_url = parse_str(data.get("imageUrl"))
    if legacy_url is None:
        raise ValidationError({"imageUrl": "imageUrl must be a URL string"})
    if legacy_url:
        return [StoredImage(url=legacy_url, public_id=None)]

    if required:
        raise MissingImage()
    return []
