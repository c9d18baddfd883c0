"""
Filesystem-backed object storage.

Objects are written below a root directory using the storage key as
relative path; the returned URL is the file:// URI of the written file.
"""

import asyncio
from pathlib import Path

from product_ingest.domain.interfaces.storage_interface import ObjectStorageInterface
from product_ingest.utils.exceptions import StorageError
from product_ingest.utils.logger import get_logger

logger = get_logger(__name__)


class LocalObjectStorage(ObjectStorageInterface):
    """Object storage writing files under a root directory."""

    def __init__(self, root_dir: Path | str):
        self.root_dir = Path(root_dir).resolve()

    def path_for(self, key: str) -> Path:
        """Resolve a key to a path, refusing keys that escape the root."""
        path = (self.root_dir / key).resolve()
        if path == self.root_dir or self.root_dir not in path.parents:
            raise StorageError(f"Invalid storage key: {key!r}", context={"key": key})
        return path

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self.path_for(key)
        if path.exists():
            raise StorageError(f"Object already exists: {key}", context={"key": key})

        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}", context={"key": key}) from e

        logger.debug(f"Stored {len(data)} bytes ({content_type}) at {path}")
        return path.as_uri()

    async def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError as e:
            raise StorageError(f"Object not found: {key}", context={"key": key}) from e
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}", context={"key": key}) from e

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "xb") as f:
            f.write(data)
