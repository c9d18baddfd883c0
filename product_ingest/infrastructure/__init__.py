"""Infrastructure adapters for object storage and the catalog document store."""

from pathlib import Path

from product_ingest.domain.interfaces.catalog_interface import DocumentStoreInterface
from product_ingest.domain.interfaces.storage_interface import ObjectStorageInterface
from product_ingest.utils.config import StorageConfig

from .catalog import FirestoreDocumentStore, JsonDocumentStore
from .storage import FirebaseObjectStorage, LocalObjectStorage


def create_object_storage(config: StorageConfig) -> ObjectStorageInterface:
    """Build the object storage adapter selected by config.backend."""
    if config.backend == "firebase":
        return FirebaseObjectStorage(
            bucket=config.firebase_bucket,
            auth_token=config.auth_token,
            timeout_seconds=config.timeout_seconds,
        )
    return LocalObjectStorage(Path(config.local_root) / "storage")


def create_document_store(config: StorageConfig) -> DocumentStoreInterface:
    """Build the document store adapter selected by config.backend."""
    if config.backend == "firebase":
        return FirestoreDocumentStore(
            project_id=config.firebase_project_id,
            auth_token=config.auth_token,
            timeout_seconds=config.timeout_seconds,
        )
    return JsonDocumentStore(Path(config.local_root) / "catalog")


__all__ = [
    "FirebaseObjectStorage",
    "FirestoreDocumentStore",
    "JsonDocumentStore",
    "LocalObjectStorage",
    "create_document_store",
    "create_object_storage",
]
