"""Deterministic generator for running without an API key (LLM_PROVIDER=mock)."""

from typing import List

from .models import AnswerResult, IntakeFinalResult, QAPair
from .parsing import clamp_briefing, parse_answer


class MockGenerator:
    """Returns canned, well-formed output through the same coercion path."""

    def __init__(self):
        self.answer_calls = 0
        self.brief_calls = 0

    async def answer(self, question: str) -> AnswerResult:
        self.answer_calls += 1
        return parse_answer({
            "answer": "모의 응답입니다. 실제 배포에서는 언어 모델이 답변을 생성합니다.",
            "claims": [
                {
                    "text": "증상이 지속되거나 악화되면 의료기관을 방문하는 것이 좋습니다.",
                    "cites": ["kdca"],
                },
                {
                    "text": "응급 증상이 있으면 즉시 119에 연락해야 합니다.",
                    "cites": ["kdca", "who"],
                },
            ],
        })

    async def brief(self, symptom_text: str, qa: List[QAPair]) -> IntakeFinalResult:
        self.brief_calls += 1
        answered = [pair.q for pair in qa if pair.a.strip() in ("예", "yes", "Yes")]
        return clamp_briefing({
            "preVisitBriefing": {
                "oneLiner": symptom_text,
                "visitPurpose": "증상 확인 및 진료 상담",
                "topConcerns": [symptom_text],
            },
            "questionsForDoctor": ["어떤 검사가 필요할까요?"],
            "redFlags": answered,
        })

    async def aclose(self) -> None:
        return None
