"""Global daily quota for paid generation calls.

One counter per UTC+9 calendar day, held only by the remote store:

    UNCREATED --first INCR--> ACTIVE(count) --TTL--> EXPIRED

The first increment of a day sets a TTL of "seconds until local midnight +
margin" so stale keys clean themselves up. Increments past the cap are not
rolled back; only the allow/deny decision matters downstream.

Failure policy depends on the deployment tier injected at construction:
``dev`` fails open (unmetered usage is cheap), ``prod`` fails closed with
``QuotaUnavailableError``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import DeploymentTier
from ..exceptions import QuotaBackendError, QuotaUnavailableError
from ..observability.metrics import record_quota_decision
from .backends import QuotaBackend
from .clock import Clock, date_key, seconds_until_midnight, store_key, utc_now

logger = logging.getLogger(__name__)

DEFAULT_CAP = 500
DEFAULT_TTL_MARGIN_SECONDS = 120


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of one consume attempt."""
    allowed: bool
    remaining: int
    count: Optional[int]  # None when the store was bypassed (fail-open)
    date_key: str


@dataclass(frozen=True)
class QuotaSnapshot:
    """Read-only view of today's counter, for display only."""
    cap: int
    count: int
    remaining: int
    date_key: str


class QuotaStore:
    """Atomic increment-then-compare against a remote counter."""

    def __init__(
        self,
        backend: Optional[QuotaBackend],
        tier: DeploymentTier = "dev",
        cap: int = DEFAULT_CAP,
        ttl_margin_seconds: int = DEFAULT_TTL_MARGIN_SECONDS,
        clock: Clock = utc_now,
    ):
        self.backend = backend
        self.tier = tier
        self.cap = cap
        self.ttl_margin_seconds = ttl_margin_seconds
        self._clock = clock

    @property
    def fail_closed(self) -> bool:
        return self.tier == "prod"

    @property
    def configured(self) -> bool:
        return self.backend is not None

    def _unavailable(self, reason: str, exc: Optional[Exception] = None) -> QuotaUnavailableError:
        logger.error("Quota store unavailable (%s); failing closed", reason)
        record_quota_decision("unavailable")
        error = QuotaUnavailableError(f"Quota store unavailable: {reason}")
        if exc is not None:
            error.__cause__ = exc
        return error

    async def consume(self) -> QuotaDecision:
        """Consume one unit of today's allowance.

        Returns a decision with ``allowed`` set; raises
        ``QuotaUnavailableError`` when the store cannot be used in prod.
        """
        now = self._clock()
        today = date_key(now)

        if self.backend is None:
            if self.fail_closed:
                raise self._unavailable("store not configured")
            logger.debug("Quota store not configured; allowing (dev)")
            record_quota_decision("fail_open")
            return QuotaDecision(allowed=True, remaining=self.cap, count=None, date_key=today)

        key = store_key(now)
        try:
            count = await self.backend.incr(key)
            if count == 1:
                await self.backend.expire(key, seconds_until_midnight(now) + self.ttl_margin_seconds)
        except QuotaBackendError as e:
            if self.fail_closed:
                raise self._unavailable(str(e), e)
            logger.warning("Quota store failure, allowing request (dev): %s", e)
            record_quota_decision("fail_open")
            return QuotaDecision(allowed=True, remaining=self.cap, count=None, date_key=today)

        if count > self.cap:
            logger.warning("Global daily quota exceeded (%d/%d) for %s", count, self.cap, today)
            record_quota_decision("denied")
            return QuotaDecision(allowed=False, remaining=0, count=count, date_key=today)

        logger.info("Quota consumed (%d/%d) for %s", count, self.cap, today)
        record_quota_decision("allowed")
        return QuotaDecision(
            allowed=True, remaining=self.cap - count, count=count, date_key=today
        )

    async def snapshot(self) -> QuotaSnapshot:
        """Read today's counter without mutating it."""
        now = self._clock()
        today = date_key(now)

        if self.backend is None:
            if self.fail_closed:
                raise self._unavailable("store not configured")
            return QuotaSnapshot(cap=self.cap, count=0, remaining=self.cap, date_key=today)

        try:
            raw = await self.backend.get(store_key(now))
        except QuotaBackendError as e:
            if self.fail_closed:
                raise self._unavailable(str(e), e)
            logger.warning("Quota snapshot failed, reporting zero usage (dev): %s", e)
            return QuotaSnapshot(cap=self.cap, count=0, remaining=self.cap, date_key=today)

        count = max(0, raw or 0)
        return QuotaSnapshot(
            cap=self.cap, count=count, remaining=max(0, self.cap - count), date_key=today
        )

    async def reset(self) -> QuotaSnapshot:
        """Delete today's counter. Always requires a working store."""
        if self.backend is None:
            raise self._unavailable("store not configured")

        key = store_key(self._clock())
        try:
            await self.backend.delete(key)
        except QuotaBackendError as e:
            raise self._unavailable(str(e), e)

        logger.warning("Global daily quota counter reset by admin (%s)", key)
        return await self.snapshot()

    async def aclose(self) -> None:
        if self.backend is not None:
            await self.backend.aclose()
