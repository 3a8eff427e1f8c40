"""Storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO


@dataclass(frozen=True)
class StoredImage:
    """Location of an uploaded image and the identifier used to delete it."""

    url: str
    public_id: str | None = None


class AbstractStorage(ABC):
    """Interface for image storage backends."""

    @abstractmethod
    def upload(self, file_obj: IO[bytes], filename: str, folder: str) -> StoredImage:
        """Persist an image and return its public URL and identifier."""

    @abstractmethod
    def delete(self, public_id: str) -> bool:
        """Remove a stored image.

        Deleting an identifier that no longer exists counts as success, so
        callers can retry deletions safely.
        """
