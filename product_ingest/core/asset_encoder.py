"""Client-side re-encoding of picked images.

Every picked image is decoded, normalized to RGB and re-encoded as JPEG at
a fixed quality to bound the upload size.
"""

import asyncio
from typing import Optional

from product_ingest.domain.entities.assets import EncodedPayload, EncodingFailure, EncodeResult
from product_ingest.domain.interfaces.asset_interface import AssetSource
from product_ingest.utils import get_logger
from product_ingest.utils.config import EncoderConfig
from product_ingest.utils.image_utils import (
    DEFAULT_JPEG_QUALITY,
    JPEG_CONTENT_TYPE,
    decode_image,
    downscale,
    encode_jpeg,
    normalize_to_rgb,
)

logger = get_logger(__name__)


class AssetEncoder:
    """Stateless JPEG re-encoder, safe to run concurrently."""

    def __init__(self, quality: int = DEFAULT_JPEG_QUALITY, max_dimension: Optional[int] = None):
        """
        Args:
            quality: JPEG quality (1-95)
            max_dimension: Optional longest-side limit in pixels
        """
        if not 1 <= quality <= 95:
            raise ValueError(f"JPEG quality must be in [1, 95], got {quality}")
        self.quality = quality
        self.max_dimension = max_dimension

    @classmethod
    def from_config(cls, config: EncoderConfig) -> "AssetEncoder":
        return cls(quality=config.quality, max_dimension=config.max_dimension)

    async def encode(self, asset: AssetSource, index: int = 0) -> EncodeResult:
        """Encode one picked image in a worker thread.

        Never raises for bad input: read or decode problems come back as
        an EncodingFailure carrying the source reference.
        """
        return await asyncio.to_thread(self.encode_sync, asset, index)

    def encode_sync(self, asset: AssetSource, index: int = 0) -> EncodeResult:
        source_ref = self._safe_ref(asset, index)
        try:
            raw = asset.read_bytes()
            image = decode_image(raw)
            image = normalize_to_rgb(image)
            image = downscale(image, self.max_dimension)
            data = encode_jpeg(image, self.quality)
        except Exception as e:
            logger.error(f"Error compressing image {source_ref}: {e}")
            return EncodingFailure(index=index, source_ref=source_ref, reason=str(e))

        width, height = image.size
        logger.debug(
            f"Encoded {source_ref}: {len(raw)} -> {len(data)} bytes ({width}x{height})"
        )
        return EncodedPayload(
            index=index,
            source_ref=source_ref,
            data=data,
            content_type=JPEG_CONTENT_TYPE,
            width=width,
            height=height,
        )

    @staticmethod
    def _safe_ref(asset: AssetSource, index: int) -> str:
        try:
            return asset.ref
        except Exception:
            return f"image #{index}"
