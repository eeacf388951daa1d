"""Exception types shared across Health Links.

The orchestrator and the quota store raise these; the API layer maps each
category onto an HTTP status code. Anything that is not a ``HealthLinksError``
is treated as an internal error.
"""

from typing import Optional


class HealthLinksError(Exception):
    """Base exception for all Health Links errors."""

    status_code: int = 500
    public_message: str = "일시적인 오류가 발생했습니다. 잠시 후 다시 시도해주세요."

    def __init__(self, message: str = "", public_message: Optional[str] = None):
        if public_message is not None:
            self.public_message = public_message
        super().__init__(message or self.public_message)


class InvalidRequestError(HealthLinksError):
    """Malformed or missing required input. Nothing external has been called."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, public_message=message)


class QuotaExceededError(HealthLinksError):
    """The global daily cap has been reached."""

    status_code = 429
    public_message = "오늘은 공개 테스트 사용량이 모두 소진되었습니다. 내일 다시 이용해주세요."

    def __init__(self, count: int, cap: int):
        self.count = count
        self.cap = cap
        super().__init__(f"Global daily quota exceeded ({count}/{cap})")


class QuotaUnavailableError(HealthLinksError):
    """The quota store is misconfigured or unreachable in a fail-closed tier."""

    status_code = 503
    public_message = "서비스 점검 중입니다. 잠시 후 다시 시도해주세요."


class QuotaBackendError(HealthLinksError):
    """A remote quota store command failed (transport, status or payload)."""

    def __init__(self, message: str, status_code: int = 0):
        self.backend_status = status_code
        super().__init__(message)


class GenerationError(HealthLinksError):
    """The answer-generation collaborator failed or returned unusable output."""


class AdminAuthError(HealthLinksError):
    """Missing or wrong admin password."""

    status_code = 401
    public_message = "unauthorized"
