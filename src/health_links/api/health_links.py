"""Health-link query endpoint: checklist, pre-visit briefing and cited answers."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..exceptions import HealthLinksError, InvalidRequestError
from ..observability.metrics import record_request
from ..orchestration import Orchestrator, classify_request

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_MESSAGE = HealthLinksError.public_message


def get_orchestrator(request: Request) -> Orchestrator:
    return request.app.state.orchestrator


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/health-links/query")
async def health_links_alive():
    """Liveness message for the query endpoint."""
    return {"status": "ok", "message": "Health Link API is alive"}


@router.post("/health-links/query")
async def health_links_query(request: Request):
    """Answer a health-link query.

    Outcomes: 200 on success, 400 for invalid input, 429 when the global
    daily quota is exhausted, 503 when the quota store is unavailable in
    production, and a generic 500 for everything else.
    """
    kind = "invalid"
    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise InvalidRequestError("request body must be valid JSON") from e

        parsed = classify_request(body)
        kind = parsed.kind.value

        result = await get_orchestrator(request).handle(parsed)
        response = JSONResponse(
            content=result.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
    except HealthLinksError as e:
        if e.status_code >= 500:
            logger.error("Health-link query failed (%d): %s", e.status_code, e, exc_info=e.__cause__ is not None)
        else:
            logger.info("Health-link query rejected (%d): %s", e.status_code, e)
        response = _error_response(e.status_code, e.public_message)
    except Exception:
        logger.exception("Unexpected error in health-link query")
        response = _error_response(500, INTERNAL_ERROR_MESSAGE)

    record_request(kind, response.status_code)
    return response
