"""Per-request control flow for the health-link query endpoint."""

import logging
from typing import Union

from ..checklist import PREVISIT_CHECKLIST_V1
from ..exceptions import GenerationError, HealthLinksError, QuotaExceededError
from ..generation.base import AnswerGenerator
from ..generation.models import AnswerResult, IntakeFinalResult
from ..generation.parsing import clamp_briefing, collect_cite_aliases, sanitize_claims
from ..links.registry import safe_sources
from ..observability.logging import set_log_context
from ..quota.store import QuotaStore
from .requests import ParsedRequest, RequestKind
from .responses import BriefingResponse, FollowupResponse, InfoResponse

logger = logging.getLogger(__name__)

QueryResponse = Union[FollowupResponse, BriefingResponse, InfoResponse]


class Orchestrator:
    """Quota gate, generator call and output-safety pipeline.

    The checklist-only stage costs nothing and bypasses the quota. Every
    other stage consumes one unit before the generator is called; an
    exhausted or unavailable quota stops the request there.
    """

    def __init__(self, quota_store: QuotaStore, generator: AnswerGenerator):
        self.quota_store = quota_store
        self.generator = generator

    async def handle(self, request: ParsedRequest) -> QueryResponse:
        set_log_context(mode=request.mode or "legacy", stage=request.stage or "answer")

        if not request.kind.metered:
            return self._followup(request)

        await self._consume_quota()

        if request.kind is RequestKind.INFO_ANSWER:
            return await self._answer(request)
        return await self._brief(request)

    async def _consume_quota(self) -> None:
        # QuotaUnavailableError propagates unchanged
        decision = await self.quota_store.consume()
        if not decision.allowed:
            raise QuotaExceededError(count=decision.count or 0, cap=self.quota_store.cap)

    def _followup(self, request: ParsedRequest) -> FollowupResponse:
        return FollowupResponse(
            checklist=PREVISIT_CHECKLIST_V1,
            sources=safe_sources(request.text),
        )

    async def _answer(self, request: ParsedRequest) -> InfoResponse:
        try:
            result: AnswerResult = await self.generator.answer(request.text)
        except HealthLinksError:
            raise
        except Exception as e:
            raise GenerationError(f"Answer generation failed: {type(e).__name__}") from e

        # Recheck even though the generator already filters its own claims
        claims = sanitize_claims(result.claims)
        if len(claims) != len(result.claims):
            logger.info("Dropped %d uncited claim(s)", len(result.claims) - len(claims))

        return InfoResponse(
            answer=result.answer,
            claims=claims,
            sources=safe_sources(request.text, collect_cite_aliases(claims)),
        )

    async def _brief(self, request: ParsedRequest) -> BriefingResponse:
        try:
            result: IntakeFinalResult = await self.generator.brief(request.text, request.qa)
        except HealthLinksError:
            raise
        except Exception as e:
            raise GenerationError(f"Briefing generation failed: {type(e).__name__}") from e

        clamped = clamp_briefing(result.model_dump(by_alias=True))
        return BriefingResponse(
            pre_visit_briefing=clamped.pre_visit_briefing,
            questions_for_doctor=clamped.questions_for_doctor,
            red_flags=clamped.red_flags,
            sources=safe_sources(request.text),
        )
