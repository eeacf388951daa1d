"""Allow-list validation for outbound citation links.

Two entry points share one predicate:

- ``filter_valid_links`` is used on every user-facing response. It never
  raises, so one bad link cannot blank the whole answer.
- ``check_link`` / ``validate_links`` raise a classified error naming the
  violated rule. They exist for consistency checks and tests, never for live
  user input.
"""

from typing import Any, Iterable, List
from urllib.parse import parse_qs, urlsplit

ALLOWED_DOMAINS = (
    "kdca.go.kr",
    "health.kdca.go.kr",
    "nip.kdca.go.kr",
    "mfds.go.kr",
    "nedrug.mfds.go.kr",
    "e-gen.or.kr",
    "ncmh.go.kr",
    "kfsp.or.kr",
    "129.go.kr",
    "who.int",
    "cdc.gov",
    "medlineplus.gov",
    "pubmed.ncbi.nlm.nih.gov",
    "pmc.ncbi.nlm.nih.gov",
    "cochranelibrary.com",
    "nice.org.uk",
    "vsearch.nlm.nih.gov",
    "google.com",
)

BLOCKED_QUERY_PARAMS = ("utm_source", "utm_medium", "utm_campaign")


class LinkValidationError(ValueError):
    """Base class for a link that fails the allow-list rules."""

    rule = "invalid"

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class MalformedLinkError(LinkValidationError):
    rule = "malformed"


class InsecureSchemeError(LinkValidationError):
    rule = "scheme"


class DomainNotAllowedError(LinkValidationError):
    rule = "domain"


class TrackingParameterError(LinkValidationError):
    rule = "tracking"


def _normalized_host(hostname: str) -> str:
    host = hostname.lower().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


def is_allowed_host(hostname: str) -> bool:
    """Exact match or dot-delimited subdomain of an allow-listed domain."""
    host = _normalized_host(hostname)
    return any(host == domain or host.endswith("." + domain) for domain in ALLOWED_DOMAINS)


def check_link(raw: Any) -> None:
    """Raise a ``LinkValidationError`` subclass if ``raw`` breaks any rule."""
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedLinkError(f"Invalid URL format: {raw!r}", url=str(raw))

    try:
        parts = urlsplit(raw.strip())
        hostname = parts.hostname
        # Accessing .port validates the netloc's port component
        parts.port
    except ValueError as e:
        raise MalformedLinkError(f"Invalid URL format: {raw}", url=raw) from e

    if not parts.scheme or not hostname:
        raise MalformedLinkError(f"Invalid URL format: {raw}", url=raw)

    if parts.scheme.lower() != "https":
        raise InsecureSchemeError(f"Non-HTTPS URL blocked: {raw}", url=raw)

    if not is_allowed_host(hostname):
        raise DomainNotAllowedError(
            f"Domain not allowed: {_normalized_host(hostname)}", url=raw
        )

    params = parse_qs(parts.query, keep_blank_values=True)
    for name in BLOCKED_QUERY_PARAMS:
        if name in params:
            raise TrackingParameterError(f"Tracking parameter blocked: {raw}", url=raw)


def is_valid_link(raw: Any) -> bool:
    """Return True if the URL is HTTPS, allow-listed and tracking-free."""
    try:
        check_link(raw)
    except LinkValidationError:
        return False
    return True


def validate_links(urls: Iterable[str]) -> None:
    """Strict batch check: raises on an empty list or the first bad URL."""
    if not isinstance(urls, (list, tuple)) or not urls:
        raise LinkValidationError("URL list is empty or invalid")
    for raw in urls:
        check_link(raw)


def filter_valid_links(urls: Any) -> List[str]:
    """Return only the URLs that pass validation, in input order. Never raises."""
    if not isinstance(urls, (list, tuple)):
        return []
    return [u for u in urls if is_valid_link(u)]
