"""Response bodies of the health-link query endpoint (camelCase on the wire)."""

from typing import List, Literal

from pydantic import Field

from ..checklist import ChecklistSection
from ..generation.models import CamelModel, Claim, PreVisitBriefing
from ..links.registry import SourceItem

SAFETY_NOTICE = (
    "본 정보는 의료 진단/처방이 아닌 참고용 안내입니다. "
    "응급/위험 증상 시 119 또는 의료기관에 즉시 연락하세요."
)


class Safety(CamelModel):
    notice: str = SAFETY_NOTICE


class FollowupResponse(CamelModel):
    mode: Literal["intake"] = "intake"
    stage: Literal["followup"] = "followup"
    checklist: List[ChecklistSection]
    safety: Safety = Field(default_factory=Safety)
    sources: List[SourceItem]


class BriefingResponse(CamelModel):
    safety: Safety = Field(default_factory=Safety)
    pre_visit_briefing: PreVisitBriefing
    questions_for_doctor: List[str]
    red_flags: List[str]
    sources: List[SourceItem]


class InfoResponse(CamelModel):
    safety: Safety = Field(default_factory=Safety)
    answer: str
    claims: List[Claim]
    sources: List[SourceItem]
