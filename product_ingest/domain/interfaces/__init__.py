# Domain Interfaces Package
"""
Abstract base classes defining contracts for collaborators.
"""

from .asset_interface import AssetSource
from .catalog_interface import DocumentStoreInterface
from .observer_interface import PipelineObserver
from .storage_interface import ObjectStorageInterface

__all__ = [
    "AssetSource",
    "DocumentStoreInterface",
    "ObjectStorageInterface",
    "PipelineObserver",
]
