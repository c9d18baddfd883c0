"""
Asset value objects: picked image sources, encoded payloads and upload results.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from product_ingest.domain.interfaces.asset_interface import AssetSource


@dataclass(frozen=True)
class FileAsset(AssetSource):
    """Picked image living on the local filesystem."""

    path: Path

    @property
    def ref(self) -> str:
        return str(self.path)

    def read_bytes(self) -> bytes:
        return Path(self.path).read_bytes()


@dataclass(frozen=True)
class BytesAsset(AssetSource):
    """Picked image already held in memory."""

    name: str
    data: bytes = field(repr=False)

    @property
    def ref(self) -> str:
        return self.name

    def read_bytes(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class EncodedPayload:
    """Normalized image bytes ready for upload."""

    index: int
    source_ref: str
    data: bytes = field(repr=False)
    content_type: str = "image/jpeg"
    width: int = 0
    height: int = 0

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class EncodingFailure:
    """An image that could not be decoded or re-encoded."""

    index: int
    source_ref: str
    reason: str


@dataclass(frozen=True)
class AssetRef:
    """Confirmed upload: storage key plus its dereferenceable URL."""

    index: int
    source_ref: str
    key: str
    url: str


@dataclass(frozen=True)
class UploadFailure:
    """An upload the storage service did not confirm."""

    index: int
    source_ref: str
    cause: Optional[BaseException] = None

    @property
    def reason(self) -> str:
        return str(self.cause) if self.cause is not None else "unknown error"


EncodeResult = Union[EncodedPayload, EncodingFailure]
UploadResult = Union[AssetRef, UploadFailure]
