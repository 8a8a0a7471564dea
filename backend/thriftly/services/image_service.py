"""
Image Service
Validates and uploads product images through a BlobStore

Upload rules:
- only image/* mime types
- at most MAX_IMAGE_BYTES per file
- at most MAX_IMAGES_PER_PRODUCT files per request
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from thriftly.connectors.blob_storage import BlobStore
from thriftly.core.config import settings
from thriftly.core.exceptions import ValidationError
from thriftly.domain.product import ProductImage

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    content: bytes
    filename: str
    mime_type: str


class ImageService:
    """Upload/delete product images; storage failures propagate to the caller"""

    def __init__(
        self,
        blob_store: BlobStore,
        max_bytes: Optional[int] = None,
        max_images: Optional[int] = None,
    ):
        self.blob_store = blob_store
        self.max_bytes = max_bytes or settings.MAX_IMAGE_BYTES
        self.max_images = max_images or settings.MAX_IMAGES_PER_PRODUCT

    def validate(self, uploads: List[ImageUpload]) -> None:
        """
        Raises:
            ValidationError describing the first rejected file
        """
        if len(uploads) > self.max_images:
            raise ValidationError(f"At most {self.max_images} images per upload")

        for upload in uploads:
            if not (upload.mime_type or "").startswith("image/"):
                raise ValidationError(f"Only image files are allowed ({upload.filename})")
            if len(upload.content) > self.max_bytes:
                raise ValidationError(
                    f"{upload.filename} exceeds the {self.max_bytes // (1024 * 1024)}MB limit"
                )

    def upload_all(self, uploads: Iterable[ImageUpload], alt: Optional[str] = None) -> List[ProductImage]:
        """
        Validate every file first, then upload in order

        Returns:
            ProductImage references ready to attach to a product
        """
        uploads = list(uploads)
        self.validate(uploads)

        images = []
        for upload in uploads:
            url = self.blob_store.put(upload.content, upload.filename, upload.mime_type)
            images.append(ProductImage(url=url, alt=alt))
        return images

    def delete_all(self, urls: Iterable[str]) -> List[str]:
        """
        Best-effort delete of every URL

        Returns:
            URLs that could not be deleted (already logged)
        """
        failed = []
        for url in urls:
            try:
                self.blob_store.delete(url)
            except Exception as e:
                logger.warning(f"Error deleting image {url}: {e}")
                failed.append(url)
        return failed
