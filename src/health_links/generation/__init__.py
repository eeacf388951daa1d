"""Answer-generation collaborators and output coercion."""

import logging

from ..config import Settings
from ..exceptions import GenerationError
from .base import AnswerGenerator
from .mock import MockGenerator
from .models import AnswerResult, Claim, IntakeFinalResult, PreVisitBriefing, QAPair
from .openai_client import OpenAIGenerator

logger = logging.getLogger(__name__)


def create_generator(settings: Settings) -> AnswerGenerator:
    """Create the configured generator."""
    if settings.llm_provider == "mock":
        logger.info("Answer generator: mock")
        return MockGenerator()

    if not settings.openai_api_key:
        raise GenerationError("OPENAI_API_KEY is not set (use LLM_PROVIDER=mock to run without it)")

    logger.info("Answer generator: OpenAI (%s)", settings.model_name)
    return OpenAIGenerator(
        api_key=settings.openai_api_key,
        model=settings.model_name,
        timeout=settings.generation_timeout_seconds,
    )


__all__ = [
    "AnswerGenerator",
    "AnswerResult",
    "Claim",
    "IntakeFinalResult",
    "MockGenerator",
    "OpenAIGenerator",
    "PreVisitBriefing",
    "QAPair",
    "create_generator",
]
