"""Key-value backends for the global quota counter.

Every backend method is a single remote command. ``incr`` in particular must
be one atomic operation on the store; never emulate it with GET + SET.
"""

import logging
from typing import Any, Dict, Optional, Protocol, Tuple
from urllib.parse import quote

import httpx

from ..exceptions import QuotaBackendError
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class QuotaBackend(Protocol):
    """Protocol for quota counter stores."""

    async def incr(self, key: str) -> int:
        """Atomically increment ``key`` and return the post-increment value."""
        ...

    async def expire(self, key: str, seconds: int) -> None:
        """Set a time-to-live on ``key``."""
        ...

    async def get(self, key: str) -> Optional[int]:
        """Read ``key`` without mutating it. None when the key does not exist."""
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``."""
        ...

    async def aclose(self) -> None:
        ...


class UpstashRestBackend:
    """Upstash Redis over its REST API.

    Commands map onto ``{base_url}/{command}/{args...}`` with a bearer token.
    Any transport failure, non-2xx status, ``{"error": ...}`` body or
    unparsable payload raises ``QuotaBackendError``; there are no retries.
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {token}"}

    async def _command(self, method: str, *parts: Any) -> Any:
        path = "/".join(quote(str(p), safe="") for p in parts)
        url = f"{self._base_url}/{path}"
        command = str(parts[0]).upper()
        try:
            response = await self._client.request(method, url, headers=self._headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise QuotaBackendError(
                f"Upstash {command} failed: HTTP {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise QuotaBackendError(
                f"Upstash {command} failed: {type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            raise QuotaBackendError(f"Upstash {command} returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise QuotaBackendError(f"Upstash {command} returned unexpected payload")
        if payload.get("error"):
            raise QuotaBackendError(f"Upstash {command} failed: {payload['error']}")
        return payload.get("result")

    async def incr(self, key: str) -> int:
        result = await self._command("POST", "incr", key)
        if isinstance(result, bool) or not isinstance(result, int):
            raise QuotaBackendError("Upstash INCR returned a non-integer result")
        return result

    async def expire(self, key: str, seconds: int) -> None:
        await self._command("POST", "expire", key, int(seconds))

    async def get(self, key: str) -> Optional[int]:
        result = await self._command("GET", "get", key)
        if result is None:
            return None
        try:
            return int(result)
        except (TypeError, ValueError):
            logger.warning("Quota key %s holds a non-integer value; treating as 0", key)
            return 0

    async def delete(self, key: str) -> None:
        await self._command("POST", "del", key)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class InMemoryBackend:
    """Single-process backend for local demos and tests.

    Honors TTLs against the injected clock. Each method runs without awaiting
    between read and write, so increments are atomic on one event loop.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._data: Dict[str, Tuple[int, Optional[float]]] = {}

    def _now(self) -> float:
        return self._clock().timestamp()

    def _live(self, key: str) -> Optional[int]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._now():
            del self._data[key]
            return None
        return value

    async def incr(self, key: str) -> int:
        current = self._live(key)
        expires_at = self._data[key][1] if current is not None else None
        value = (current or 0) + 1
        self._data[key] = (value, expires_at)
        return value

    async def expire(self, key: str, seconds: int) -> None:
        current = self._live(key)
        if current is not None:
            self._data[key] = (current, self._now() + seconds)

    async def get(self, key: str) -> Optional[int]:
        return self._live(key)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def aclose(self) -> None:
        self._data.clear()

    def ttl(self, key: str) -> Optional[float]:
        """Seconds left before ``key`` expires; None if persistent or missing."""
        if self._live(key) is None:
            return None
        expires_at = self._data[key][1]
        if expires_at is None:
            return None
        return expires_at - self._now()
