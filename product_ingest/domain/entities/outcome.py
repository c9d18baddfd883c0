"""
Pipeline states and terminal outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from product_ingest.utils.exceptions import IngestionError

from .assets import AssetRef
from .product import ProductRecord


class PipelineState(Enum):
    """States of one submission."""

    IDLE = "idle"
    VALIDATING = "validating"
    ENCODING = "encoding"
    UPLOADING = "uploading"
    COMMITTING = "committing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.SUCCEEDED, PipelineState.FAILED)


@dataclass(frozen=True)
class Succeeded:
    """Terminal outcome: the record was committed."""

    record: ProductRecord
    ack: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """
    Terminal outcome: nothing was committed.

    orphaned_refs lists images uploaded during this submission that are not
    referenced by any record. They are only deleted when orphan cleanup is
    enabled; cleaned_up tells whether that happened.
    """

    error: IngestionError
    failed_in: PipelineState
    orphaned_refs: Tuple[AssetRef, ...] = field(default_factory=tuple)
    cleaned_up: bool = False

    @property
    def succeeded(self) -> bool:
        return False


PipelineOutcome = Union[Succeeded, Failed]
