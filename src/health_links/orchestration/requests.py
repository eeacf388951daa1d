"""Classification and validation of health-link query payloads.

Validation happens here, before the quota is touched: a malformed request
never consumes allowance and never reaches the generator.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..exceptions import InvalidRequestError
from ..generation.models import QAPair


class RequestKind(str, enum.Enum):
    INTAKE_FOLLOWUP = "intake_followup"
    INTAKE_FINAL = "intake_final"
    INFO_ANSWER = "info_answer"

    @property
    def metered(self) -> bool:
        """Whether this kind calls the paid generator."""
        return self is not RequestKind.INTAKE_FOLLOWUP


@dataclass(frozen=True)
class ParsedRequest:
    kind: RequestKind
    text: str
    qa: List[QAPair] = field(default_factory=list)
    mode: Optional[str] = None
    stage: Optional[str] = None


def _required_text(value: Any, message: str = "input is required") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(message)
    try:
        # JSON allows lone surrogates; they cannot be percent-encoded into links
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidRequestError("input contains invalid characters") from e
    return value.strip()


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def parse_qa(value: Any) -> List[QAPair]:
    """Lenient Q/A list: non-lists become empty, bad entries are skipped."""
    if not isinstance(value, list):
        return []
    pairs = []
    for entry in value:
        if not isinstance(entry, dict) or not isinstance(entry.get("q"), str):
            continue
        answer = entry.get("a")
        pairs.append(QAPair(q=entry["q"], a=answer if isinstance(answer, str) else ""))
    return pairs


def classify_request(body: Any) -> ParsedRequest:
    """Decide which flow a payload belongs to and validate its input.

    Raises:
        InvalidRequestError: for any malformed or unknown payload.
    """
    if not isinstance(body, dict):
        raise InvalidRequestError("request body must be a JSON object")

    mode = _optional_str(body.get("mode"))
    stage = _optional_str(body.get("stage"))

    if mode == "intake":
        if stage == "followup":
            return ParsedRequest(
                kind=RequestKind.INTAKE_FOLLOWUP,
                text=_required_text(body.get("input")),
                mode=mode,
                stage=stage,
            )
        if stage == "final":
            return ParsedRequest(
                kind=RequestKind.INTAKE_FINAL,
                text=_required_text(body.get("input")),
                qa=parse_qa(body.get("qa")),
                mode=mode,
                stage=stage,
            )
        raise InvalidRequestError("stage must be 'followup' or 'final'")

    # Legacy shape: {"question": "..."}. Any truthy mode or stage, string or not,
    # rules it out.
    if not body.get("mode") and not body.get("stage") and isinstance(body.get("question"), str):
        return ParsedRequest(
            kind=RequestKind.INFO_ANSWER,
            text=_required_text(body["question"], "question is required"),
        )

    if mode == "info" and stage == "answer":
        return ParsedRequest(
            kind=RequestKind.INFO_ANSWER,
            text=_required_text(body.get("input")),
            mode=mode,
            stage=stage,
        )

    raise InvalidRequestError("question or valid mode/stage is required")
