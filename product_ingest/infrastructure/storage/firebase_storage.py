"""
Firebase Cloud Storage adapter using the REST upload endpoint.
"""

from typing import Optional
from urllib.parse import quote

import aiohttp

from product_ingest.domain.interfaces.storage_interface import ObjectStorageInterface
from product_ingest.infrastructure.http_client import AiohttpAdapter
from product_ingest.utils.exceptions import StorageError
from product_ingest.utils.logger import get_logger

logger = get_logger(__name__)

FIREBASE_STORAGE_URL = "https://firebasestorage.googleapis.com/v0/b"


class FirebaseObjectStorage(AiohttpAdapter, ObjectStorageInterface):
    """
    Uploads objects to a Firebase Storage bucket.

    The returned URL is the public download URL carrying the download
    token Firebase assigns to the object.
    """

    def __init__(
        self,
        bucket: str,
        auth_token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = FIREBASE_STORAGE_URL,
    ):
        super().__init__(auth_token=auth_token, timeout_seconds=timeout_seconds, session=session)
        self.bucket = bucket
        self.base_url = base_url.rstrip("/")

    def object_url(self, key: str) -> str:
        return f"{self.base_url}/{self.bucket}/o/{quote(key, safe='')}"

    def download_url(self, key: str, token: str) -> str:
        return f"{self.object_url(key)}?alt=media&token={token}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        upload_url = f"{self.base_url}/{self.bucket}/o"
        metadata = await self._request_json(
            "POST",
            upload_url,
            action=f"Upload of {key}",
            params={"uploadType": "media", "name": key},
            data=data,
            headers=self._headers({"Content-Type": content_type}),
        )

        tokens = metadata.get("downloadTokens")
        if not tokens:
            raise StorageError(
                f"Upload of {key} returned no download token",
                context={"key": key, "bucket": self.bucket},
            )

        logger.debug(f"Uploaded {key} to bucket {self.bucket}")
        return self.download_url(key, tokens.split(",")[0])

    async def delete(self, key: str) -> None:
        await self._request_json(
            "DELETE",
            self.object_url(key),
            action=f"Delete of {key}",
            headers=self._headers(),
        )
