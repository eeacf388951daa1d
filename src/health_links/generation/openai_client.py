"""OpenAI-backed answer generator."""

import logging
import time
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from ..exceptions import GenerationError
from ..observability.metrics import record_generation
from .models import AnswerResult, IntakeFinalResult, QAPair
from .parsing import clamp_briefing, parse_answer, parse_json_object
from .prompts import ANSWER_SYSTEM_PROMPT, BRIEFING_SYSTEM_PROMPT, build_briefing_user_message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT = 30.0
TEMPERATURE = 0.3
BRIEFING_MAX_TOKENS = 1024


class OpenAIGenerator:
    """Calls the chat completions API in JSON mode. No automatic retries."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def _complete_json(
        self, kind: str, system_prompt: str, user_message: str, **extra: Any
    ) -> Dict[str, Any]:
        start = time.monotonic()
        status = "error"
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                temperature=TEMPERATURE,
                response_format={"type": "json_object"},
                **extra,
            )
            content = completion.choices[0].message.content if completion.choices else None
            payload = parse_json_object(content)
            status = "success"
            return payload
        except openai.APITimeoutError as e:
            status = "timeout"
            raise GenerationError(f"Generation timed out ({kind})") from e
        except openai.OpenAIError as e:
            raise GenerationError(f"Generation provider error ({kind}): {type(e).__name__}") from e
        finally:
            duration = time.monotonic() - start
            record_generation(kind, status, duration)
            logger.info("Generation %s finished: %s in %.2fs", kind, status, duration)

    async def answer(self, question: str) -> AnswerResult:
        payload = await self._complete_json("answer", ANSWER_SYSTEM_PROMPT, question)
        return parse_answer(payload)

    async def brief(self, symptom_text: str, qa: List[QAPair]) -> IntakeFinalResult:
        payload = await self._complete_json(
            "briefing",
            BRIEFING_SYSTEM_PROMPT,
            build_briefing_user_message(symptom_text, qa),
            max_tokens=BRIEFING_MAX_TOKENS,
        )
        return clamp_briefing(payload)

    async def aclose(self) -> None:
        await self._client.close()
