"""Core ingestion components for Product Ingest."""

from .asset_encoder import AssetEncoder
from .asset_uploader import AssetUploader
from .ingestion_pipeline import IngestionPipeline
from .record_builder import (
    CatalogRecordBuilder,
    ValidationReason,
    ValidationResult,
    parse_sizes,
)
from .retry import RetryPolicy

__all__ = [
    "AssetEncoder",
    "AssetUploader",
    "CatalogRecordBuilder",
    "IngestionPipeline",
    "RetryPolicy",
    "ValidationReason",
    "ValidationResult",
    "parse_sizes",
]
