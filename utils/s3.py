import logging
import uuid
from io import BytesIO

from minio import Minio
from minio.error import S3Error
from urllib3.exceptions import HTTPError

from core.config import settings
from core.errors import MediaDeleteFailure, MediaUploadFailure

logger = logging.getLogger(__name__)


class MediaStore:
    """
    Object storage for photo JPEGs (MinIO/S3).

    put() returns the object key, which is what photos store as their locator.
    S3 and transport errors (endpoint down, retries exhausted) both surface as
    MediaUploadFailure / MediaDeleteFailure.
    Both calls block, run them through run_in_threadpool.
    """

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self.bucket_name = bucket_name

    def build_key(self, owner_id: int, ext: str = "jpg") -> str:
        return f"photos/{owner_id}/{uuid.uuid4().hex}.{ext}"

    def put(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        try:
            self._client.put_object(
                self.bucket_name,
                key,
                BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (S3Error, HTTPError) as e:
            raise MediaUploadFailure(f"S3 upload failed for {key}: {e}") from e
        return key

    def delete(self, key: str) -> None:
        try:
            self._client.remove_object(self.bucket_name, key)
        except (S3Error, HTTPError) as e:
            raise MediaDeleteFailure(f"S3 delete failed for {key}: {e}") from e


_media_store: MediaStore | None = None


def get_media_store() -> MediaStore:
    """Process-wide MediaStore, used as Depends(get_media_store)."""
    global _media_store
    if _media_store is None:
        endpoint = settings.AWS_S3_ENDPOINT_URL
        client = Minio(
            endpoint.replace("https://", "").replace("http://", "").rstrip("/"),
            access_key=settings.AWS_ACCESS_KEY_ID,
            secret_key=settings.AWS_SECRET_ACCESS_KEY,
            region=settings.AWS_S3_REGION,
            secure=endpoint.startswith("https://"),
        )
        _media_store = MediaStore(client, settings.AWS_S3_BUCKET_NAME)
        logger.info("Media store ready: bucket=%s", settings.AWS_S3_BUCKET_NAME)
    return _media_store
