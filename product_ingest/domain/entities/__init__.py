# Domain Entities Package
"""
Core business entities and value objects.
"""

from .selection import SelectionSnapshot, SelectionState, format_color, parse_color, to_signed_argb
from .assets import (
    AssetRef,
    BytesAsset,
    EncodedPayload,
    EncodingFailure,
    FileAsset,
    UploadFailure,
)
from .product import ProductForm, ProductInputs, ProductRecord, SizeSegmentPolicy
from .outcome import Failed, PipelineOutcome, PipelineState, Succeeded

__all__ = [
    "AssetRef",
    "BytesAsset",
    "EncodedPayload",
    "EncodingFailure",
    "Failed",
    "FileAsset",
    "PipelineOutcome",
    "PipelineState",
    "ProductForm",
    "ProductInputs",
    "ProductRecord",
    "SelectionSnapshot",
    "SelectionState",
    "SizeSegmentPolicy",
    "Succeeded",
    "UploadFailure",
    "format_color",
    "parse_color",
    "to_signed_argb",
]
