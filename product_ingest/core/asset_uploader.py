"""Upload of encoded images to object storage."""

import uuid

from product_ingest.domain.entities.assets import AssetRef, EncodedPayload, UploadFailure, UploadResult
from product_ingest.domain.interfaces.storage_interface import ObjectStorageInterface
from product_ingest.utils import get_logger

logger = get_logger(__name__)


class AssetUploader:
    """
    Sends encoded payloads to object storage.

    Each call generates a new random key under the configured prefix, so
    retries and concurrent sessions never overwrite each other. The
    uploader itself never retries.
    """

    def __init__(self, storage: ObjectStorageInterface, prefix: str = "products/images"):
        self.storage = storage
        self.prefix = prefix.strip("/")

    def new_key(self) -> str:
        return f"{self.prefix}/{uuid.uuid4()}"

    async def upload(self, payload: EncodedPayload) -> UploadResult:
        """Upload one payload.

        Returns:
            AssetRef once storage confirmed the write, UploadFailure otherwise
        """
        key = self.new_key()
        try:
            url = await self.storage.put(key, payload.data, payload.content_type)
        except Exception as e:
            logger.error(f"Error uploading image {payload.source_ref}: {e}")
            return UploadFailure(index=payload.index, source_ref=payload.source_ref, cause=e)

        logger.debug(f"Uploaded {payload.source_ref} as {key}")
        return AssetRef(index=payload.index, source_ref=payload.source_ref, key=key, url=url)

    async def delete(self, ref: AssetRef) -> bool:
        """Delete a previously uploaded asset.

        Returns:
            True if deleted, False if storage refused
        """
        try:
            await self.storage.delete(ref.key)
        except Exception as e:
            logger.warning(f"Could not delete orphaned image {ref.key}: {e}")
            return False
        logger.info(f"Deleted orphaned image {ref.key}")
        return True
