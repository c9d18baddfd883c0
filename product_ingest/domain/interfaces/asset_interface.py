"""
Abstract interface for picked image sources.
"""

from abc import ABC, abstractmethod


class AssetSource(ABC):
    """
    Opaque byte source returned by the image picker.

    The pipeline only needs a stable reference for error reporting and
    a way to read the raw bytes.
    """

    @property
    @abstractmethod
    def ref(self) -> str:
        """Return a human-readable reference (path, URI or name)."""
        pass

    @abstractmethod
    def read_bytes(self) -> bytes:
        """
        Read the raw, still-encoded image bytes.

        Raises:
            OSError: If the source cannot be read.
        """
        pass
