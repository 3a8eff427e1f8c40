"""Local filesystem storage implementation."""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from config import Config

from .abstract_storage import AbstractStorage, StoredImage


class LocalStorage(AbstractStorage):
    """Persist images to the local filesystem under the configured upload directory."""

    def __init__(self, upload_dir: str | None = None, url_prefix: str | None = None):
        self.base_directory = Path(upload_dir or Config.UPLOAD_DIR)
        self.url_prefix = (url_prefix or Config.UPLOAD_URL_PREFIX).rstrip("/")
        os.makedirs(self.base_directory, exist_ok=True)

    def _resolve(self, public_id: str) -> Path:
        path = (self.base_directory / public_id).resolve()
        if self.base_directory.resolve() not in path.parents:
            raise ValueError(f"Path escapes the upload directory: {public_id}")
        return path

    def upload(self, file_obj: IO[bytes], filename: str, folder: str) -> StoredImage:
        """Save an image under ``folder`` with a unique name."""

        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")

        directory = self.base_directory / secure_filename(folder)
        os.makedirs(directory, exist_ok=True)
        stored_name = f"{uuid.uuid4().hex}{Path(safe_name).suffix.lower()}"
        destination = directory / stored_name
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        public_id = destination.relative_to(self.base_directory).as_posix()
        return StoredImage(url=f"{self.url_prefix}/{public_id}", public_id=public_id)

    def delete(self, public_id: str) -> bool:
        """Remove the stored file; a missing file counts as deleted."""

        self._resolve(public_id).unlink(missing_ok=True)
        return True

    def exists(self, public_id: str) -> bool:
        """Return True if the given relative path exists within the upload directory."""

        return self._resolve(public_id).exists()
