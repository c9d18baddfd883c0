"""
Product entities: the raw form, the submission inputs and the committed record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .selection import SelectionSnapshot, to_signed_argb


class SizeSegmentPolicy(str, Enum):
    """What to do with empty segments in comma-separated size text.

    KEEP turns "," into ["", ""];
    DROP filters them out ("," -> []).
    """

    KEEP = "keep"
    DROP = "drop"


@dataclass(frozen=True)
class ProductForm:
    """Raw, untrusted text typed into the product form."""

    name: str = ""
    category: str = ""
    price: str = ""
    offer_percentage: str = ""
    description: str = ""
    sizes: str = ""


@dataclass(frozen=True)
class ProductInputs:
    """Everything one submission needs: form text plus a selection snapshot."""

    form: ProductForm
    selection: SelectionSnapshot

    @property
    def image_count(self) -> int:
        return len(self.selection.images)


class ProductRecord(BaseModel):
    """Canonical product entity committed to the document store.

    Immutable once built. Serialized field names follow the catalog
    convention (offerPercentage, imageUrls).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Client-generated unique identifier")
    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    price: float = Field(..., gt=0.0, description="Unit price")
    offer_percentage: Optional[float] = Field(
        default=None, ge=0.0, le=100.0, alias="offerPercentage", description="Discount percentage"
    )
    description: Optional[str] = Field(default=None, description="Free-text description")
    colors: tuple[int, ...] = Field(default=(), description="Signed 32-bit ARGB colors in pick order")
    sizes: Optional[tuple[str, ...]] = Field(default=None, description="Sizes, absent if none given")
    image_refs: tuple[str, ...] = Field(
        default=(), alias="imageUrls", description="Uploaded image URLs in selection order"
    )

    @field_validator('colors')
    @classmethod
    def validate_colors(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """Store colors as signed 32-bit ARGB ints."""
        return tuple(to_signed_argb(c) for c in v)

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the document-store field set."""
        return self.model_dump(mode="json", by_alias=True)
