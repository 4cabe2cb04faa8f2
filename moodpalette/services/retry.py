"""Retry policy wrapped around single text generation calls.

Rate-limited calls are retried with exponential backoff and jitter. Every other
failure, and exhausted retries, resolve to ``FALLBACK`` so callers substitute
static data instead of surfacing the error.
"""
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Final, Literal

from ..core.errors import ErrorKind, GenerationError

logger = logging.getLogger(__name__)


class FallbackSignal(Enum):
    FALLBACK = "fallback"


FALLBACK: Final = FallbackSignal.FALLBACK

RetryResult = str | Literal[FallbackSignal.FALLBACK]


def jittered_delay(base_delay: float, rng: random.Random, jitter: float = 0.5) -> float:
    """``base_delay`` scaled by a uniform factor in ``[1 - jitter, 1 + jitter]``."""
    return base_delay * rng.uniform(1 - jitter, 1 + jitter)


class RetryController:
    def __init__(
        self,
        *,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        jitter: float = 0.5,
        call_timeout: float | None = None,
        retry_on: frozenset[ErrorKind] = frozenset({ErrorKind.RATE_LIMITED}),
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.jitter = jitter
        self.call_timeout = call_timeout
        self.retry_on = retry_on
        self._sleep = sleep
        self._rng = rng or random.Random()

    async def invoke(self, operation: Callable[[], Awaitable[str]], *, label: str = "generation") -> RetryResult:
        """Run ``operation`` until it returns text or the policy gives up."""
        delay = self.base_delay
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._call(operation)
            except GenerationError as exc:
                if exc.kind not in self.retry_on:
                    logger.warning("%s failed (%s), using fallback: %s", label, exc.kind, exc)
                    return FALLBACK
                if attempt == self.max_attempts:
                    break
                wait = jittered_delay(delay, self._rng, self.jitter)
                logger.warning(
                    "%s %s on attempt %d/%d, retrying in %.2fs",
                    label,
                    exc.kind,
                    attempt,
                    self.max_attempts,
                    wait,
                )
                await self._sleep(wait)
                delay *= 2
            except asyncio.TimeoutError:
                logger.warning("%s timed out, using fallback (call deadline: %s)", label, self.call_timeout)
                return FALLBACK
            except Exception as exc:
                logger.warning("%s failed unexpectedly, using fallback: %r", label, exc)
                return FALLBACK

        logger.warning("Exceeded max retries for %s, using fallback", label)
        return FALLBACK

    async def _call(self, operation: Callable[[], Awaitable[str]]) -> str:
        if self.call_timeout is None:
            return await operation()
        return await asyncio.wait_for(operation(), timeout=self.call_timeout)
