"""Logging setup for Health Links.

Every record carries the request id and, once the orchestrator has classified
the request, its mode and stage. Request bodies are never logged: they may
contain health information.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Dict, Optional

_CONTEXT: Dict[str, ContextVar] = {
    name: ContextVar(name, default=None) for name in ("request_id", "mode", "stage")
}

# Client libraries that log every HTTP round trip at INFO
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


def set_log_context(
    request_id: Optional[str] = None,
    mode: Optional[str] = None,
    stage: Optional[str] = None,
):
    """Set contextual logging fields for the current async context."""
    for name, value in (("request_id", request_id), ("mode", mode), ("stage", stage)):
        if value is not None:
            _CONTEXT[name].set(value)


def clear_log_context():
    for var in _CONTEXT.values():
        var.set(None)


def log_context() -> Dict[str, str]:
    """The context fields currently set, in a fixed order."""
    return {name: var.get() for name, var in _CONTEXT.items() if var.get()}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line; Korean text is kept readable."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **log_context(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = (
            f"[{self.formatTime(record, self.datefmt)}] {record.levelname:8s} "
            f"{record.name}: {record.getMessage()}"
        )
        context = log_context()
        if context:
            msg += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"
        if record.exc_info and record.exc_info[1]:
            msg += "\n" + self.formatException(record.exc_info)
        return msg


def configure_logging(environment: str = "development", log_level: str = "INFO"):
    """Install a single stdout handler on the root logger.

    JSON lines in production, human-readable lines everywhere else.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
