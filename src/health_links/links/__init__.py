"""Citation links: allow-list validator and source registry."""

from .registry import CITE_ALIASES, REGISTRY, SourceItem, build_sources, safe_sources
from .validator import (
    ALLOWED_DOMAINS,
    BLOCKED_QUERY_PARAMS,
    LinkValidationError,
    check_link,
    filter_valid_links,
    is_valid_link,
    validate_links,
)

__all__ = [
    "ALLOWED_DOMAINS",
    "BLOCKED_QUERY_PARAMS",
    "CITE_ALIASES",
    "LinkValidationError",
    "REGISTRY",
    "SourceItem",
    "build_sources",
    "check_link",
    "filter_valid_links",
    "is_valid_link",
    "safe_sources",
    "validate_links",
]
