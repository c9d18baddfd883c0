"""Unit tests for product entities and outcomes."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from product_ingest.domain.entities import (
    Failed,
    PipelineState,
    ProductRecord,
    Succeeded,
)
from product_ingest.utils.exceptions import CommitError


@pytest.fixture
def record():
    return ProductRecord(
        id="p-1",
        name="Linen shirt",
        category="Shirts",
        price=19.99,
        offer_percentage=15.0,
        colors=(0xFFFF0000,),
        sizes=("S", "M"),
        image_refs=("https://cdn/a.jpg",),
    )


class TestProductRecord:
    """Test the committed record model."""

    def test_to_document_field_names(self, record):
        """Test the catalog field naming convention."""
        document = record.to_document()

        assert document == {
            "id": "p-1",
            "name": "Linen shirt",
            "category": "Shirts",
            "price": 19.99,
            "offerPercentage": 15.0,
            "description": None,
            "colors": [-65536],
            "sizes": ["S", "M"],
            "imageUrls": ["https://cdn/a.jpg"],
        }

    def test_populate_by_alias(self):
        record = ProductRecord(
            id="p-2", name="n", category="c", price=1.0,
            offerPercentage=5.0, imageUrls=["u"],
        )

        assert record.offer_percentage == 5.0
        assert record.image_refs == ("u",)

    def test_frozen(self, record):
        with pytest.raises(PydanticValidationError):
            record.name = "Other"

    @pytest.mark.parametrize("price", [0, -1.0])
    def test_price_must_be_positive(self, price):
        with pytest.raises(PydanticValidationError):
            ProductRecord(id="p", name="n", category="c", price=price)

    def test_offer_range(self):
        with pytest.raises(PydanticValidationError):
            ProductRecord(id="p", name="n", category="c", price=1.0, offer_percentage=101)

    def test_empty_name_rejected(self):
        with pytest.raises(PydanticValidationError):
            ProductRecord(id="p", name="", category="c", price=1.0)


class TestOutcomes:
    """Test terminal outcomes and states."""

    def test_succeeded(self, record):
        outcome = Succeeded(record=record, ack="Products/p-1")

        assert outcome.succeeded
        assert outcome.record.id == "p-1"

    def test_failed_defaults(self):
        outcome = Failed(error=CommitError(), failed_in=PipelineState.COMMITTING)

        assert not outcome.succeeded
        assert outcome.orphaned_refs == ()
        assert outcome.cleaned_up is False

    def test_terminal_states(self):
        terminal = {s for s in PipelineState if s.is_terminal}

        assert terminal == {PipelineState.SUCCEEDED, PipelineState.FAILED}


def test_unsigned_colors_are_stored_signed():
    """Test colors given as unsigned ARGB are persisted as signed 32-bit ints."""
    record = ProductRecord(
        id="p-3", name="n", category="c", price=1.0, colors=(0xFFFF0000, 0x7F00FF00, -16777216)
    )

    assert record.to_document()["colors"] == [-65536, 0x7F00FF00, -16777216]
