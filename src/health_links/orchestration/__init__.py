"""Request orchestration for the metered answer endpoint."""

from .orchestrator import Orchestrator, QueryResponse
from .requests import ParsedRequest, RequestKind, classify_request
from .responses import SAFETY_NOTICE

__all__ = [
    "Orchestrator",
    "ParsedRequest",
    "QueryResponse",
    "RequestKind",
    "SAFETY_NOTICE",
    "classify_request",
]
