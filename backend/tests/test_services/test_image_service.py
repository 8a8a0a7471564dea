"""
Unit tests for ImageService

Author: Thriftly
Date: 2026-10-19
"""
from unittest.mock import MagicMock

import pytest

from thriftly.connectors.blob_storage import InMemoryBlobStore
from thriftly.core.exceptions import ValidationError
from thriftly.services.image_service import ImageService, ImageUpload


def jpeg(name: str = "photo.jpg", size: int = 10) -> ImageUpload:
    return ImageUpload(content=b"\xff" * size, filename=name, mime_type="image/jpeg")


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def image_service(blob_store):
    return ImageService(blob_store, max_bytes=100, max_images=2)


class TestUpload:
    """Test validation and upload"""

    def test_upload_returns_image_refs(self, image_service, blob_store):
        images = image_service.upload_all([jpeg("front.jpg"), jpeg("back.jpg")], alt="Jacket")

        assert len(images) == 2
        assert images[0].url.startswith("memory://blobs/")
        assert images[0].url.endswith("-front.jpg")
        assert images[0].alt == "Jacket"
        assert blob_store.get(images[1].url) == b"\xff" * 10

    def test_rejects_non_images(self, image_service, blob_store):
        upload = ImageUpload(content=b"%PDF", filename="doc.pdf", mime_type="application/pdf")

        with pytest.raises(ValidationError):
            image_service.upload_all([upload])

        assert blob_store.blobs == {}

    def test_rejects_oversized_file(self, image_service):
        with pytest.raises(ValidationError):
            image_service.upload_all([jpeg(size=101)])

    def test_rejects_too_many_files(self, image_service):
        with pytest.raises(ValidationError):
            image_service.upload_all([jpeg(), jpeg(), jpeg()])

    def test_nothing_uploaded_when_one_file_is_invalid(self, image_service, blob_store):
        with pytest.raises(ValidationError):
            image_service.upload_all([jpeg(), jpeg(size=500)])

        assert blob_store.blobs == {}


class TestDelete:

    def test_delete_all(self, image_service, blob_store):
        images = image_service.upload_all([jpeg()])

        failed = image_service.delete_all([images[0].url])

        assert failed == []
        assert blob_store.blobs == {}

    def test_failures_are_reported_not_raised(self):
        store = MagicMock()
        store.delete.side_effect = [RuntimeError("timeout"), True]
        service = ImageService(store, max_bytes=100, max_images=2)

        failed = service.delete_all(["https://cdn/a.jpg", "https://cdn/b.jpg"])

        assert failed == ["https://cdn/a.jpg"]
        assert store.delete.call_count == 2
