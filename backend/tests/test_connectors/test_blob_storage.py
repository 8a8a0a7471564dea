"""
Unit tests for blob storage connectors

The Supabase connector is tested against a mocked client; no network.

Author: Thriftly
Date: 2026-10-19
"""
from unittest.mock import MagicMock, patch

import pytest

from thriftly.connectors.blob_storage import (
    InMemoryBlobStore, SupabaseBlobStore, blob_name_from_url, make_blob_name,
)


class TestBlobNames:

    @patch("thriftly.connectors.blob_storage.time.time", return_value=1700000000.5)
    def test_make_blob_name(self, mock_time):
        assert make_blob_name("my photo.jpg") == "1700000000500-my_photo.jpg"

    def test_blob_name_from_url(self):
        url = "https://x.supabase.co/storage/v1/object/public/clothing-images/1700-a.jpg?download="

        assert blob_name_from_url(url) == "1700-a.jpg"


class TestSupabaseBlobStore:
    """Test the Supabase Storage connector"""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        bucket = client.storage.from_.return_value
        bucket.get_public_url.return_value = "https://x.supabase.co/storage/v1/object/public/clothing-images/1-a.jpg"
        return client

    def test_put_uploads_with_content_type(self, client):
        # Arrange
        store = SupabaseBlobStore(bucket="clothing-images", client=client)

        # Act
        url = store.put(b"data", "a.jpg", "image/jpeg")

        # Assert
        client.storage.from_.assert_called_with("clothing-images")
        upload_kwargs = client.storage.from_.return_value.upload.call_args.kwargs
        assert upload_kwargs["file"] == b"data"
        assert upload_kwargs["path"].endswith("-a.jpg")
        assert upload_kwargs["file_options"] == {"content-type": "image/jpeg"}
        assert url.endswith("/1-a.jpg")

    def test_delete_removes_by_blob_name(self, client):
        store = SupabaseBlobStore(bucket="clothing-images", client=client)

        assert store.delete("https://x.supabase.co/storage/v1/object/public/clothing-images/1-a.jpg") is True
        client.storage.from_.return_value.remove.assert_called_once_with(["1-a.jpg"])

    def test_upload_errors_propagate(self, client):
        client.storage.from_.return_value.upload.side_effect = RuntimeError("bucket not found")
        store = SupabaseBlobStore(bucket="clothing-images", client=client)

        with pytest.raises(RuntimeError):
            store.put(b"data", "a.jpg", "image/jpeg")

    def test_requires_credentials_without_client(self):
        with patch("thriftly.core.config.settings.SUPABASE_URL", ""):
            with pytest.raises(ValueError):
                SupabaseBlobStore(url="", key="")


class TestInMemoryBlobStore:

    def test_put_get_delete(self):
        store = InMemoryBlobStore()

        url = store.put(b"abc", "a.jpg", "image/jpeg")

        assert store.get(url) == b"abc"
        assert store.delete(url) is True
        assert store.get(url) is None
        assert store.delete(url) is False

    def test_same_filename_twice_gets_distinct_urls(self):
        store = InMemoryBlobStore()

        with patch("thriftly.connectors.blob_storage.time.time", return_value=1.0):
            first = store.put(b"1", "a.jpg", "image/jpeg")
            second = store.put(b"2", "a.jpg", "image/jpeg")

        assert first != second
        assert store.get(first) == b"1"
        assert store.get(second) == b"2"
