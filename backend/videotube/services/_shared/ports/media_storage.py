from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import BinaryIO, Protocol
from uuid import uuid4


class MediaStorageError(Exception):
    """Raised by storage adapters when an upload or delete fails."""


@dataclass(frozen=True, slots=True)
class StoredMedia:
    """
    Result of a successful upload.

    :ivar key: Object key inside the bucket (used for deletion).
    :ivar url: Public URL stored on the owning row.
    """

    key: str
    url: str


@dataclass(frozen=True, slots=True)
class MediaFile:
    """
    File handed to the storage port, decoupled from the web framework.

    :ivar stream: Readable binary stream.
    :ivar filename: Original client filename.
    :ivar content_type: MIME type reported by the client.
    """

    stream: BinaryIO
    filename: str
    content_type: str = "application/octet-stream"


class MediaStorage(Protocol):
    """Port for the object store holding avatars and cover images."""

    def upload(self, file: MediaFile, *, folder: str) -> StoredMedia:
        """
        Store ``file`` under ``folder`` and return its public URL.

        :raises MediaStorageError: If the store rejects the upload.
        """
        ...

    def delete(self, key: str) -> None:
        """
        Remove a stored object. Missing keys are ignored.

        :raises MediaStorageError: If the store rejects the deletion.
        """
        ...


def object_key(folder: str, filename: str) -> str:
    """Build a collision-free object key, keeping the file extension."""
    ext = ""
    if "." in filename:
        ext = "." + filename.rsplit(".", 1)[-1].lower()
    return f"{folder.strip('/')}/{uuid4().hex}{ext}"


class InMemoryMediaStorage(MediaStorage):
    """
    Dictionary-backed storage used in tests and local runs without a bucket.

    Set ``fail_uploads`` to simulate an unavailable store.
    """

    def __init__(self, base_url: str = "https://media.test") -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}
        self.fail_uploads = False
        self._lock = threading.Lock()

    def upload(self, file: MediaFile, *, folder: str) -> StoredMedia:
        if self.fail_uploads:
            raise MediaStorageError("upload rejected")
        key = object_key(folder, file.filename)
        data = file.stream.read()
        with self._lock:
            self.objects[key] = data
        return StoredMedia(key=key, url=f"{self.base_url}/{key}")

    def delete(self, key: str) -> None:
        with self._lock:
            self.objects.pop(key, None)
