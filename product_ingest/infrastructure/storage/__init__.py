"""Object storage adapters."""

from .firebase_storage import FirebaseObjectStorage
from .local_storage import LocalObjectStorage

__all__ = ["FirebaseObjectStorage", "LocalObjectStorage"]
