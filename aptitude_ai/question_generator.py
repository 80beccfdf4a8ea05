# aptitude_ai/question_generator.py

import logging
from typing import Any, List, Optional, Sequence
from openai import OpenAI
from google import genai

from aptitude_core.schema import Question
from aptitude_core.errors import GenerationError
from aptitude_ai.api_throttler import ApiThrottler, ThrottlerError
from aptitude_ai.config import Settings
from aptitude_ai.prompts import SYSTEM_PROMPT, make_prompt
from aptitude_ai.question_parser import parse_questions

logger = logging.getLogger(__name__)


class QuestionGenerator:
    """
    Generation collaborator used by AssessmentSession.

    Subclasses only implement _complete(prompt) -> raw text; prompt building,
    parsing and error mapping live here so every backend behaves the same.
    """

    model: str = ""

    def __init__(self, throttler: Optional[ApiThrottler] = None, temperature: float = 0.7):
        self.throttler = throttler or ApiThrottler(min_interval=2.0, max_retries=5, max_wait=25.0, per_model=True)
        self.temperature = temperature

    def _complete(self, prompt: str) -> str:
        raise NotImplementedError

    def generate_questions(self, topic: str, difficulty_mix: Sequence[str]) -> List[Question]:
        mix = list(difficulty_mix)
        if not mix:
            return []
        prompt = make_prompt(topic, mix)

        try:
            raw = self._complete(prompt)
        except ThrottlerError as e:
            logger.error(f"❌ API failed after {e.attempts} attempts: {e.last_exception}")
            raise GenerationError(f"API error: {e}", cause=e.last_exception or e) from e
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"🚨 Unexpected error while generating questions: {e}")
            raise GenerationError(f"Unexpected error: {e}", cause=e) from e

        try:
            questions = parse_questions(raw, mix)
        except GenerationError as e:
            logger.warning(f"⚠️ Invalid generator output, rejected: {e}")
            raise

        logger.info(f"🧩 Generated {len(questions)} question(s) with {self.model}")
        return questions


class OpenAIQuestionGenerator(QuestionGenerator):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        client: Any = None,
        throttler: Optional[ApiThrottler] = None,
        temperature: float = 0.7,
    ):
        super().__init__(throttler=throttler, temperature=temperature)
        if client is None:
            if not api_key:
                raise ValueError("❌ OPENAI_API_KEY is not configured in .env")
            client = OpenAI(api_key=api_key)
        self.client = client
        self.model = model

    def _complete(self, prompt: str) -> str:
        response = self.throttler.safe_openai_chat(
            self.client,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            model=self.model,
            temperature=self.temperature,
        )
        content = response.choices[0].message.content
        return (content or "").strip()


class GeminiQuestionGenerator(QuestionGenerator):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash",
        client: Any = None,
        throttler: Optional[ApiThrottler] = None,
        temperature: float = 0.7,
    ):
        super().__init__(throttler=throttler, temperature=temperature)
        if client is None:
            if not api_key:
                raise ValueError("❌ GOOGLE_API_KEY is not set!")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model

    def _complete(self, prompt: str) -> str:
        response = self.throttler.call(
            lambda: self.client.models.generate_content(
                model=self.model,
                contents=f"{SYSTEM_PROMPT}\n\n{prompt}",
                config={"temperature": self.temperature},
            ),
            model=self.model,
        )
        return (getattr(response, "text", None) or "").strip()


def build_generator(settings: Settings) -> QuestionGenerator:
    """Backend selected by QUESTION_PROVIDER."""
    throttler = ApiThrottler(
        min_interval=settings.min_interval,
        max_retries=settings.max_retries,
        max_wait=settings.max_wait,
        per_model=True,
    )
    if settings.provider == "gemini":
        return GeminiQuestionGenerator(
            api_key=settings.google_api_key,
            model=settings.gemini_model,
            throttler=throttler,
            temperature=settings.temperature,
        )
    return OpenAIQuestionGenerator(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        throttler=throttler,
        temperature=settings.temperature,
    )
