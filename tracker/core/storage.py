"""
core/storage.py

Comment image bucket on a MinIO / S3-compatible object store.
Objects are public-read; comments keep the public URL and the object
path is recovered from it when the image is replaced or deleted.
"""

import io
from functools import lru_cache
from typing import Optional

from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError

from tracker.core.config import settings
from tracker.core.logger import logger

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_BYTES = 5 * 1024 * 1024
CACHE_CONTROL = "max-age=3600"


class CommentImageStorage:
    def __init__(self, client: Optional[Minio], bucket: str, public_base_url: str):
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        self.client.put_object(
            self.bucket,
            path,
            io.BytesIO(data),
            length=len(data),
            content_type=content_type,
            metadata={"Cache-Control": CACHE_CONTROL},
        )

    def remove(self, path: str) -> None:
        self.client.remove_object(self.bucket, path)

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{path}"

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        if not url:
            return None
        parts = url.split(f"/{self.bucket}/", 1)
        if len(parts) < 2 or not parts[1]:
            return None
        return parts[1]

    def remove_by_url(self, url: Optional[str]) -> bool:
        """Best-effort delete. Returns False when nothing was removed."""
        path = self.path_from_url(url)
        if not path:
            return False
        try:
            self.remove(path)
        except (MinioException, HTTPError, OSError) as e:
            logger.warning(f"[Storage] Failed to remove {self.bucket}/{path}: {e}")
            return False
        logger.info(f"[Storage] Removed {self.bucket}/{path}")
        return True


@lru_cache
def get_storage() -> CommentImageStorage:
    client = Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE,
    )
    return CommentImageStorage(client, settings.COMMENT_IMAGES_BUCKET, settings.STORAGE_PUBLIC_URL)
