"""Data shapes exchanged with the answer-generation collaborator."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Claim(CamelModel):
    """One atomic assertion with at least one citation alias."""
    text: str
    cites: List[str]


class AnswerResult(CamelModel):
    answer: str = ""
    claims: List[Claim] = Field(default_factory=list)


class QAPair(CamelModel):
    """One checklist question and the user's answer."""
    q: str
    a: str = ""


class SymptomsSummary(CamelModel):
    onset: str = ""
    course: str = ""
    location: str = ""
    quality: str = ""
    severity_0_to_10: str = Field(default="", alias="severity0to10")
    frequency_duration: str = ""
    worse_factors: List[str] = Field(default_factory=list)
    relief_factors: List[str] = Field(default_factory=list)
    associated_symptoms: List[str] = Field(default_factory=list)
    recent_triggers: List[str] = Field(default_factory=list)


class PreVisitBriefing(CamelModel):
    """Structured summary a patient can hand to a clinician."""
    one_liner: str = ""
    visit_purpose: str = ""
    top_concerns: List[str] = Field(default_factory=list)
    symptoms_summary: SymptomsSummary = Field(default_factory=SymptomsSummary)
    meds_supplements: str = ""
    allergies_adverse_reactions: str = ""
    past_history_and_tests: str = ""
    family_history: str = ""
    lifestyle_exposure: str = ""
    pregnancy_related: str = ""


class IntakeFinalResult(CamelModel):
    pre_visit_briefing: PreVisitBriefing = Field(default_factory=PreVisitBriefing)
    questions_for_doctor: List[str] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)
