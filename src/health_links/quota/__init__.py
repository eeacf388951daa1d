"""Global daily quota: clock helpers, store backends and the quota store."""

import logging
from typing import Optional

from ..config import Settings
from .backends import InMemoryBackend, QuotaBackend, UpstashRestBackend
from .store import QuotaDecision, QuotaSnapshot, QuotaStore

logger = logging.getLogger(__name__)


def create_quota_backend(settings: Settings) -> Optional[QuotaBackend]:
    """Create the configured backend, or None when it is not configured."""
    if settings.quota_backend == "memory":
        logger.info("Quota backend: in-memory (single process)")
        return InMemoryBackend()

    if not settings.quota_store_configured:
        logger.warning(
            "Upstash env vars not configured; quota will %s",
            "fail closed" if settings.deployment_tier == "prod" else "be skipped",
        )
        return None

    logger.info("Quota backend: Upstash REST")
    return UpstashRestBackend(
        url=settings.upstash_redis_rest_url,
        token=settings.upstash_redis_rest_token,
        timeout=settings.quota_store_timeout_seconds,
    )


def create_quota_store(settings: Settings) -> QuotaStore:
    """Build the process-wide quota store from settings."""
    return QuotaStore(
        backend=create_quota_backend(settings),
        tier=settings.deployment_tier,
        cap=settings.global_daily_cap,
        ttl_margin_seconds=settings.quota_ttl_margin_seconds,
    )


__all__ = [
    "InMemoryBackend",
    "QuotaBackend",
    "QuotaDecision",
    "QuotaSnapshot",
    "QuotaStore",
    "UpstashRestBackend",
    "create_quota_backend",
    "create_quota_store",
]
