"""Admin-only view and reset of the global daily quota counter."""

import logging
import secrets
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..config import Settings
from ..exceptions import AdminAuthError, QuotaUnavailableError
from ..quota.store import QuotaSnapshot, QuotaStore

logger = logging.getLogger(__name__)

router = APIRouter()


def verify_admin_password(provided: Any, settings: Settings) -> None:
    """Raise ``AdminAuthError`` unless ``provided`` matches ADMIN_PASSWORD.

    With no ADMIN_PASSWORD configured every attempt is rejected.
    """
    expected: Optional[str] = settings.admin_password
    if not expected or not isinstance(provided, str) or not provided:
        raise AdminAuthError("missing admin password")
    if not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AdminAuthError("wrong admin password")


def _snapshot_body(snapshot: QuotaSnapshot) -> dict:
    return {
        "cap": snapshot.cap,
        "count": snapshot.count,
        "remaining": snapshot.remaining,
        "dateKey": snapshot.date_key,
    }


async def _authorize(request: Request) -> None:
    try:
        body = await request.json()
    except ValueError:
        body = None
    password = body.get("password") if isinstance(body, dict) else None
    verify_admin_password(password, request.app.state.settings)


async def _run(request: Request, action: str) -> JSONResponse:
    try:
        await _authorize(request)
        store: QuotaStore = request.app.state.quota_store
        snapshot = await (store.reset() if action == "reset" else store.snapshot())
    except AdminAuthError as e:
        logger.warning("Admin quota %s rejected: %s", action, e)
        return JSONResponse(status_code=401, content={"error": "unauthorized"})
    except QuotaUnavailableError:
        return JSONResponse(status_code=503, content={"error": "unavailable"})
    except Exception:
        logger.exception("Admin quota %s failed", action)
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    return JSONResponse(content=_snapshot_body(snapshot))


@router.post("/quota")
async def get_quota_snapshot(request: Request):
    """Return today's global usage: cap, count, remaining and date key."""
    return await _run(request, "snapshot")


@router.post("/quota/reset")
async def reset_quota(request: Request):
    """Delete today's counter and return the fresh snapshot."""
    return await _run(request, "reset")
