"""
Presentation-side observer of a pipeline run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from product_ingest.domain.entities.outcome import PipelineOutcome, PipelineState


class PipelineObserver:
    """
    Receives state transitions, loading toggles and the terminal outcome.

    All hooks are no-ops; presentation layers override what they render.
    Hooks must not raise.
    """

    def on_loading(self, active: bool) -> None:
        """Called with True before validation starts and False after the terminal state."""
        pass

    def on_state(self, state: PipelineState) -> None:
        """Called on every state transition."""
        pass

    def on_outcome(self, outcome: PipelineOutcome) -> None:
        """Called exactly once per submission with the terminal outcome."""
        pass
