"""Tests for the media storage adapters."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tests.helpers.utils import media
from videotube.infra.storage import SupabaseMediaStorage
from videotube.services._shared.ports import InMemoryMediaStorage, MediaStorageError


class TestInMemoryMediaStorage:
    def test_upload_and_delete(self):
        storage = InMemoryMediaStorage()
        stored = storage.upload(media("Face.PNG", b"img"), folder="avatars")

        assert stored.key.startswith("avatars/")
        assert stored.key.endswith(".png")
        assert stored.url == f"https://media.test/{stored.key}"
        assert storage.objects[stored.key] == b"img"

        storage.delete(stored.key)
        assert storage.objects == {}

    def test_keys_do_not_collide(self):
        storage = InMemoryMediaStorage()
        a = storage.upload(media("same.png"), folder="avatars")
        b = storage.upload(media("same.png"), folder="avatars")
        assert a.key != b.key

    def test_failing_uploads(self):
        storage = InMemoryMediaStorage()
        storage.fail_uploads = True
        with pytest.raises(MediaStorageError):
            storage.upload(media(), folder="avatars")


class TestSupabaseMediaStorage:
    def _storage(self):
        client = MagicMock()
        bucket = client.storage.from_.return_value
        bucket.get_public_url.side_effect = lambda key: f"https://cdn.test/{key}"
        return SupabaseMediaStorage(client, "media"), client, bucket

    def test_upload_uses_bucket_and_public_url(self):
        storage, client, bucket = self._storage()

        stored = storage.upload(media("a.png", b"img", "image/png"), folder="covers")

        client.storage.from_.assert_called_with("media")
        bucket.upload.assert_called_once_with(
            path=stored.key, file=b"img", file_options={"content-type": "image/png"}
        )
        assert stored.url == f"https://cdn.test/{stored.key}"

    def test_upload_errors_are_wrapped(self):
        storage, _, bucket = self._storage()
        bucket.upload.side_effect = RuntimeError("network down")
        with pytest.raises(MediaStorageError):
            storage.upload(media(), folder="avatars")

    def test_delete(self):
        storage, _, bucket = self._storage()
        storage.delete("avatars/x.png")
        bucket.remove.assert_called_once_with(["avatars/x.png"])
