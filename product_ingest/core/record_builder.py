"""Validation of raw product input and assembly of ProductRecord.

The builder is pure: validate() never touches the network and returns the
same result for the same input, build() only adds a fresh identifier.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional, Sequence

from product_ingest.domain.entities.product import (
    ProductInputs,
    ProductRecord,
    SizeSegmentPolicy,
)
from product_ingest.utils import get_logger
from product_ingest.utils.exceptions import ValidationError
from product_ingest.utils.validators import clean_text, parse_percentage, parse_price

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidationReason:
    """One failing field and why it failed."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate(): ordered field-level reasons, empty when valid."""

    reasons: tuple[ValidationReason, ...] = field(default_factory=tuple)
    price: Optional[float] = None

    @property
    def is_valid(self) -> bool:
        return not self.reasons

    @property
    def fields(self) -> list[str]:
        return [reason.field for reason in self.reasons]

    def to_error(self) -> ValidationError:
        return ValidationError(reasons=[(r.field, r.message) for r in self.reasons])


def parse_sizes(
    text: Optional[str],
    policy: SizeSegmentPolicy = SizeSegmentPolicy.KEEP,
) -> Optional[list[str]]:
    """Split comma-separated size text into trimmed segments.

    Args:
        text: Raw size text, e.g. "S, M ,L"
        policy: Whether empty segments are kept or dropped

    Returns:
        Ordered list of sizes, or None when no size text was supplied
    """
    text = clean_text(text)
    if not text:
        return None

    sizes = [segment.strip() for segment in text.split(",")]
    if policy is SizeSegmentPolicy.DROP:
        sizes = [size for size in sizes if size]
    return sizes


class CatalogRecordBuilder:
    """Validates a ProductInputs and assembles the canonical ProductRecord."""

    def __init__(self, size_policy: SizeSegmentPolicy = SizeSegmentPolicy.KEEP):
        self.size_policy = size_policy

    def validate(self, inputs: ProductInputs) -> ValidationResult:
        """Check required fields.

        Reasons are reported in a fixed order: images, name, category, price.
        Offer percentage, description and sizes never fail validation.
        """
        form = inputs.form
        reasons: list[ValidationReason] = []

        if not inputs.selection.images:
            reasons.append(ValidationReason("images", "Select at least one image"))
        if not clean_text(form.name):
            reasons.append(ValidationReason("name", "Name is required"))
        if not clean_text(form.category):
            reasons.append(ValidationReason("category", "Category is required"))

        price = None
        try:
            price = parse_price(form.price)
        except ValueError as e:
            reasons.append(ValidationReason("price", str(e)))

        return ValidationResult(reasons=tuple(reasons), price=price)

    def build(self, inputs: ProductInputs, image_refs: Sequence[str]) -> ProductRecord:
        """Assemble a record with a freshly generated id.

        Args:
            inputs: Validated submission inputs
            image_refs: Uploaded image URLs, one per selected image, in selection order

        Raises:
            ValidationError: If inputs do not validate
            ValueError: If image_refs does not match the selected image count
        """
        result = self.validate(inputs)
        if not result.is_valid:
            raise result.to_error()

        if len(image_refs) != inputs.image_count:
            raise ValueError(
                f"Expected {inputs.image_count} image refs, got {len(image_refs)}"
            )

        form = inputs.form
        sizes = parse_sizes(form.sizes, self.size_policy)

        return ProductRecord(
            id=str(uuid.uuid4()),
            name=clean_text(form.name),
            category=clean_text(form.category),
            price=result.price,
            offer_percentage=self._parse_offer(form.offer_percentage),
            description=clean_text(form.description) or None,
            colors=tuple(inputs.selection.colors),
            sizes=tuple(sizes) if sizes is not None else None,
            image_refs=tuple(image_refs),
        )

    def _parse_offer(self, text: Optional[str]) -> Optional[float]:
        """Unusable offer text means no discount rather than a failure."""
        try:
            return parse_percentage(text)
        except ValueError as e:
            logger.warning(f"Ignoring offer percentage: {e}")
            return None
