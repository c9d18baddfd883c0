"""
Retry policy with exponential backoff.

Used by the pipeline around uploads and the catalog commit; the storage
collaborators themselves never retry.

Example:
    >>> policy = RetryPolicy(max_attempts=3, base_delay=0.5)
    >>> policy.delay_for(1), policy.delay_for(2)
    (0.5, 1.0)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from product_ingest.utils.config import RetryConfig
from product_ingest.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RetryPolicy:
    """
    Exponential backoff settings.

    Attributes:
        max_attempts: Total attempts per operation (1 disables retry).
        base_delay: Delay before the first retry in seconds.
        backoff_factor: Multiplier applied after each retry.
        max_delay: Maximum delay in seconds.
    """

    max_attempts: int = 1
    base_delay: float = 0.5
    backoff_factor: float = 2.0
    max_delay: float = 10.0
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay,
            backoff_factor=config.backoff_factor,
            max_delay=config.max_delay,
        )

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        return cls(max_attempts=1)

    def delay_for(self, retry_number: int) -> float:
        """Delay before retry number retry_number (1-based)."""
        delay = self.base_delay * (self.backoff_factor ** (retry_number - 1))
        return min(delay, self.max_delay)

    async def wait(self, retry_number: int) -> float:
        """Sleep before the given retry and return the delay used."""
        delay = self.delay_for(retry_number)
        if delay > 0:
            logger.debug(f"Retry #{retry_number}: waiting {delay:.2f}s")
            await self.sleep(delay)
        return delay
