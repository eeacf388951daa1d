"""Answer-generation collaborator interface."""

from typing import List, Protocol

from .models import AnswerResult, IntakeFinalResult, QAPair


class AnswerGenerator(Protocol):
    """Protocol for answer generators.

    Implementations may raise ``GenerationError`` (or any exception); the
    orchestrator converts failures into a generic internal error.
    """

    async def answer(self, question: str) -> AnswerResult:
        """Answer a free-form health question with cited claims."""
        ...

    async def brief(self, symptom_text: str, qa: List[QAPair]) -> IntakeFinalResult:
        """Structure a chief complaint and checklist answers into a briefing."""
        ...

    async def aclose(self) -> None:
        ...
