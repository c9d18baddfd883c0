"""
Abstract interface for the catalog document store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class DocumentStoreInterface(ABC):
    """
    Abstract base class for document stores holding product records.
    """

    @abstractmethod
    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        """
        Add a document to a collection.

        Args:
            collection: Collection name (e.g. "Products").
            document: JSON-serializable document; its "id" field becomes the
                document id.

        Returns:
            Acknowledgement from the store (document name or path).

        Raises:
            DocumentExistsError: If a document with this id is already stored.
            StorageError: If the store rejects the write.
        """
        pass

    async def close(self) -> None:
        """Release network resources. No-op by default."""
        return None
