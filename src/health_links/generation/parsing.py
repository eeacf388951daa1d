"""Coercion and clamping of generator output.

The generator is a paid collaborator but its output is treated as untrusted
input: declared shapes are never assumed, invalid entries are dropped and
over-long fields are truncated deterministically instead of rejected.
"""

import json
import re
from typing import Any, Dict, Iterable, List

from ..exceptions import GenerationError
from .models import AnswerResult, Claim, IntakeFinalResult, PreVisitBriefing, SymptomsSummary

# Aliases the answer generator is allowed to cite.
GENERATOR_CITE_ALIASES = ("kdca", "who", "cdc", "pubmed", "medlineplus", "nice")

ONE_LINER_MAX_SENTENCES = 1
ONE_LINER_MAX_CHARS = 120
VISIT_PURPOSE_MAX_SENTENCES = 2
VISIT_PURPOSE_MAX_CHARS = 240
FIELD_MAX_CHARS = 240
LIST_MAX_ITEMS = 6
QUESTIONS_FOR_DOCTOR_MAX = 3
RED_FLAGS_MAX = 6

ELLIPSIS = "…"

# A sentence runs up to its terminator; a trailing unterminated fragment counts too.
_SENTENCE_RE = re.compile(r"[^.?!。]+(?:[.?!。]+|$)")


def parse_json_object(content: Any) -> Dict[str, Any]:
    """Parse a JSON object from raw completion text."""
    if not isinstance(content, str) or not content.strip():
        raise GenerationError("Empty response from generation provider")
    try:
        parsed = json.loads(content)
    except ValueError as e:
        raise GenerationError("Generation provider returned invalid JSON") from e
    if not isinstance(parsed, dict):
        raise GenerationError("Generation provider returned a non-object JSON value")
    return parsed


def safe_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def clamp_text(text: str, max_chars: int) -> str:
    """Trim; if still longer than ``max_chars``, cut and end with an ellipsis."""
    t = text.strip()
    if len(t) <= max_chars:
        return t
    return t[: max_chars - 1] + ELLIPSIS


def clamp_sentences(text: str, max_sentences: int) -> str:
    """Keep at most ``max_sentences`` sentences (terminators . ? ! 。)."""
    t = text.strip()
    if not t:
        return t
    sentences = [s for s in _SENTENCE_RE.findall(t) if s.strip()]
    if len(sentences) <= max_sentences:
        return t
    return "".join(sentences[:max_sentences]).strip()


def clamp_list(value: Any, max_items: int) -> List[str]:
    """Keep non-blank string entries, at most ``max_items`` of them."""
    if not isinstance(value, list):
        return []
    return [x for x in value if isinstance(x, str) and x.strip()][:max_items]


def sanitize_claims(raw_claims: Any, vocabulary: Iterable[str] = GENERATOR_CITE_ALIASES) -> List[Claim]:
    """Drop unknown aliases, then drop claims left with no text or no alias."""
    if not isinstance(raw_claims, list):
        return []
    allowed = set(vocabulary)

    claims = []
    for raw in raw_claims:
        if isinstance(raw, Claim):
            raw = raw.model_dump()
        if not isinstance(raw, dict):
            continue
        text = safe_str(raw.get("text")).strip()
        raw_cites = raw.get("cites")
        cites: List[str] = []
        for alias in raw_cites if isinstance(raw_cites, list) else []:
            if isinstance(alias, str) and alias in allowed and alias not in cites:
                cites.append(alias)
        if not text or not cites:
            continue
        claims.append(Claim(text=text, cites=cites))
    return claims


def parse_answer(payload: Dict[str, Any]) -> AnswerResult:
    """Coerce a free-form answer payload into ``AnswerResult``."""
    return AnswerResult(
        answer=safe_str(payload.get("answer")).strip(),
        claims=sanitize_claims(payload.get("claims")),
    )


def collect_cite_aliases(claims: Iterable[Claim]) -> List[str]:
    """Every alias cited across ``claims``, de-duplicated."""
    aliases: List[str] = []
    for claim in claims:
        for alias in claim.cites:
            if alias not in aliases:
                aliases.append(alias)
    return aliases


def clamp_briefing(payload: Dict[str, Any]) -> IntakeFinalResult:
    """Coerce and clamp a pre-visit briefing payload.

    Missing or mistyped fields become empty strings/lists; summary fields are
    cut to their sentence and character ceilings; lists to their maximum length.
    """
    raw_b = _as_dict(payload.get("preVisitBriefing"))
    raw_s = _as_dict(raw_b.get("symptomsSummary"))

    def field(raw: Dict[str, Any], name: str) -> str:
        return clamp_text(safe_str(raw.get(name)), FIELD_MAX_CHARS)

    summary = SymptomsSummary(
        onset=field(raw_s, "onset"),
        course=field(raw_s, "course"),
        location=field(raw_s, "location"),
        quality=field(raw_s, "quality"),
        severity_0_to_10=safe_str(raw_s.get("severity0to10")),
        frequency_duration=field(raw_s, "frequencyDuration"),
        worse_factors=clamp_list(raw_s.get("worseFactors"), LIST_MAX_ITEMS),
        relief_factors=clamp_list(raw_s.get("reliefFactors"), LIST_MAX_ITEMS),
        associated_symptoms=clamp_list(raw_s.get("associatedSymptoms"), LIST_MAX_ITEMS),
        recent_triggers=clamp_list(raw_s.get("recentTriggers"), LIST_MAX_ITEMS),
    )

    briefing = PreVisitBriefing(
        one_liner=clamp_text(
            clamp_sentences(safe_str(raw_b.get("oneLiner")), ONE_LINER_MAX_SENTENCES),
            ONE_LINER_MAX_CHARS,
        ),
        visit_purpose=clamp_text(
            clamp_sentences(safe_str(raw_b.get("visitPurpose")), VISIT_PURPOSE_MAX_SENTENCES),
            VISIT_PURPOSE_MAX_CHARS,
        ),
        top_concerns=clamp_list(raw_b.get("topConcerns"), LIST_MAX_ITEMS),
        symptoms_summary=summary,
        meds_supplements=field(raw_b, "medsSupplements"),
        allergies_adverse_reactions=field(raw_b, "allergiesAdverseReactions"),
        past_history_and_tests=field(raw_b, "pastHistoryAndTests"),
        family_history=field(raw_b, "familyHistory"),
        lifestyle_exposure=field(raw_b, "lifestyleExposure"),
        pregnancy_related=field(raw_b, "pregnancyRelated"),
    )

    return IntakeFinalResult(
        pre_visit_briefing=briefing,
        questions_for_doctor=clamp_list(payload.get("questionsForDoctor"), QUESTIONS_FOR_DOCTOR_MAX),
        red_flags=clamp_list(payload.get("redFlags"), RED_FLAGS_MAX),
    )
