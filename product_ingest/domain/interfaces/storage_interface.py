"""
Abstract interface for remote object storage.
"""

from abc import ABC, abstractmethod


class ObjectStorageInterface(ABC):
    """
    Abstract base class for object storage services.

    Implementations raise StorageError when the remote store does not
    confirm an operation.
    """

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """
        Store bytes under a key.

        Args:
            key: Storage key (path-like, "/" separated).
            data: Payload bytes.
            content_type: MIME type of the payload.

        Returns:
            Externally dereferenceable URL of the stored object.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete the object stored under a key.

        Args:
            key: Storage key previously passed to put().
        """
        pass

    async def close(self) -> None:
        """Release network resources. No-op by default."""
        return None
