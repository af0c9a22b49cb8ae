"""Human-readable document identifiers (PREFIX-YEAR-SEQ) backed by an atomic counter store."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta

import structlog
from pydantic import BaseModel, Field
from pymongo.errors import PyMongoError
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from ledgerdesk import utils
from ledgerdesk.core.modules.counter.models import CounterStore, DocumentCategory
from ledgerdesk.errors import AllocationExhaustedError, StoreUnavailableError

logger = structlog.get_logger(__name__)

SEQUENCE_WIDTH = 3
FALLBACK_DIGITS = 6
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class RetryPolicy(BaseModel):
    """Bounded retry schedule for the counter increment."""

    max_retries: int = Field(default=3, ge=0)  # Retries after the first attempt
    backoff_seconds: float = Field(default=0.05, ge=0)
    backoff_max_seconds: float = Field(default=1.0, ge=0)

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def stop(self) -> stop_base:
        return stop_after_attempt(self.attempts)

    def wait(self) -> wait_base:
        """Exponential backoff starting at backoff_seconds, capped at backoff_max_seconds."""
        return wait_exponential(multiplier=self.backoff_seconds, max=self.backoff_max_seconds)


def format_identifier(category: DocumentCategory, year: int, seq: int) -> str:
    """Format e.g. INV-2026-007. Sequences above 999 widen (INV-2026-1000), never wrap."""
    if seq < 1:
        raise ValueError(f"Sequence must be positive, got {seq}")
    return f"{category.prefix}-{year}-{seq:0{SEQUENCE_WIDTH}d}"


def fallback_identifier(category: DocumentCategory, year: int, timestamp: datetime) -> str:
    """Identifier from the low-order digits of the epoch milliseconds.

    Not collision-free: two fallbacks within the same millisecond modulo 10^6 coincide.
    """
    millis = (timestamp - EPOCH) // timedelta(milliseconds=1)
    return f"{category.prefix}-{year}-{millis % 10**FALLBACK_DIGITS:0{FALLBACK_DIGITS}d}"


class IdentifierAllocator:
    """Allocates unique, increasing identifiers for every document category.

    The counter increment is the only contended step and is delegated to the store,
    which must make it atomic across processes. Formatting happens outside of it.
    """

    def __init__(
        self,
        store: CounterStore,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def allocate(self, category: DocumentCategory, now: datetime | None = None) -> str:
        """Claim the next identifier for the category in the year of `now`.

        Never raises for store failures: once retries are exhausted a fallback identifier is returned.
        """
        timestamp = now or utils.now()
        year = timestamp.year
        try:
            seq = await self.claim_sequence(category, year)
        except AllocationExhaustedError as e:
            identifier = fallback_identifier(category, year, timestamp)
            logger.warning("identifier_fallback_used", category=category, year=year, identifier=identifier, reason=str(e))
            return identifier

        identifier = format_identifier(category, year, seq)
        logger.debug("identifier_allocated", category=category, year=year, seq=seq, identifier=identifier)
        return identifier

    async def claim_sequence(self, category: DocumentCategory, year: int) -> int:
        """Increment the (category, year) counter, retrying with backoff on store failures."""
        attempts = self._policy.attempts

        def log_failure(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                "counter_increment_failed",
                category=category,
                year=year,
                attempt=retry_state.attempt_number,
                attempts=attempts,
                error=str(error),
            )

        retrying = AsyncRetrying(
            stop=self._policy.stop(),
            wait=self._policy.wait(),
            retry=retry_if_exception_type((PyMongoError, StoreUnavailableError)),
            after=log_failure,
            sleep=self._sleep,
        )
        try:
            return await retrying(self._store.increment_and_get, category, year)
        except RetryError as e:
            raise AllocationExhaustedError(
                f"Could not increment {category} counter for {year} after {attempts} attempts"
            ) from e.last_attempt.exception()
