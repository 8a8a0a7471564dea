"""
Blob Storage Connectors
Image storage for product photos

- SupabaseBlobStore: Supabase Storage bucket (production)
- InMemoryBlobStore: process-local dict (tests, demo mode)

Author: Thriftly
Date: 2026-10-19
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def make_blob_name(filename: str) -> str:
    """Prefix with epoch milliseconds so repeated uploads never collide"""
    safe_name = filename.replace("/", "_").replace(" ", "_") or "image"
    return f"{int(time.time() * 1000)}-{safe_name}"


def blob_name_from_url(url: str) -> str:
    """Blob name is the last path segment of its public URL"""
    return url.rstrip("/").split("/")[-1].split("?")[0]


class BlobStore(ABC):
    """Capability used by the image service"""

    @abstractmethod
    def put(self, content: bytes, filename: str, mime_type: str) -> str:
        """Store `content` and return its public URL"""

    @abstractmethod
    def delete(self, url: str) -> bool:
        """Delete the blob behind `url`; True when the call succeeded"""


class SupabaseBlobStore(BlobStore):
    """
    Supabase Storage connector

    Handles:
    - Uploading product images with their content type
    - Resolving public URLs
    - Deleting images when a product is removed
    """

    def __init__(self, url: str = None, key: str = None, bucket: str = None, client=None):
        """
        Initialize Supabase storage connector

        Args:
            url: Supabase project URL
            key: Service role key (needs write access to the bucket)
            bucket: Storage bucket name
            client: Pre-built supabase Client (tests)
        """
        from thriftly.core.config import settings

        self.bucket = bucket or settings.STORAGE_BUCKET

        if client is None:
            url = url or settings.SUPABASE_URL
            key = key or settings.SUPABASE_SERVICE_ROLE_KEY
            if not url or not key:
                raise ValueError("Supabase credentials not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")

            from supabase import create_client
            client = create_client(url, key)

        self.client = client

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def put(self, content: bytes, filename: str, mime_type: str) -> str:
        blob_name = make_blob_name(filename)
        try:
            self._bucket().upload(
                path=blob_name,
                file=content,
                file_options={"content-type": mime_type},
            )
        except Exception as e:
            logger.error(f"Error uploading {blob_name} to Supabase Storage: {e}")
            raise

        url = self._bucket().get_public_url(blob_name)
        logger.info(f"Uploaded image {blob_name} ({len(content)} bytes)")
        return url

    def delete(self, url: str) -> bool:
        blob_name = blob_name_from_url(url)
        try:
            self._bucket().remove([blob_name])
        except Exception as e:
            logger.error(f"Error deleting {blob_name} from Supabase Storage: {e}")
            raise
        return True


class InMemoryBlobStore(BlobStore):
    """Keeps blobs in a dict; URLs use a fake base"""

    def __init__(self, base_url: str = "memory://blobs"):
        self.base_url = base_url.rstrip("/")
        self.blobs: Dict[str, Tuple[bytes, str]] = {}

    def put(self, content: bytes, filename: str, mime_type: str) -> str:
        blob_name = make_blob_name(filename)
        while blob_name in self.blobs:
            blob_name = f"0{blob_name}"
        self.blobs[blob_name] = (content, mime_type)
        return f"{self.base_url}/{blob_name}"

    def delete(self, url: str) -> bool:
        return self.blobs.pop(blob_name_from_url(url), None) is not None

    def get(self, url: str) -> Optional[bytes]:
        entry = self.blobs.get(blob_name_from_url(url))
        return entry[0] if entry else None
