from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from videotube.services._shared.ports import (
    MediaFile,
    MediaStorage,
    MediaStorageError,
    StoredMedia,
)
from videotube.services._shared.ports.media_storage import object_key

logger = logging.getLogger(__name__)


class SupabaseMediaStorage(MediaStorage):
    """
    Adapter storing media in a Supabase storage bucket.

    Objects are public; the URL returned by ``get_public_url`` is what ends up
    on ``User.avatar`` / ``User.cover_image``.
    """

    def __init__(self, client: Any, bucket: str) -> None:
        """
        :param client: ``supabase.Client`` (or any object exposing ``storage``).
        :param bucket: Bucket name.
        """
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SupabaseMediaStorage:
        from supabase import create_client

        client = create_client(config["SUPABASE_URL"], config["SUPABASE_KEY"])
        return cls(client, config.get("MEDIA_BUCKET", "videotube"))

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def upload(self, file: MediaFile, *, folder: str) -> StoredMedia:
        key = object_key(folder, file.filename)
        data = file.stream.read()
        try:
            self._bucket().upload(
                path=key, file=data, file_options={"content-type": file.content_type}
            )
            url = self._bucket().get_public_url(key)
        except Exception as exc:
            logger.error("media.upload_failed bucket=%s key=%s", self.bucket, key, exc_info=exc)
            raise MediaStorageError(f"Upload failed for {key}") from exc
        logger.info("media.uploaded bucket=%s key=%s size=%s", self.bucket, key, len(data))
        return StoredMedia(key=key, url=url)

    def delete(self, key: str) -> None:
        try:
            self._bucket().remove([key])
        except Exception as exc:
            logger.error("media.delete_failed bucket=%s key=%s", self.bucket, key, exc_info=exc)
            raise MediaStorageError(f"Delete failed for {key}") from exc
