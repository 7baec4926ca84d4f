"""Gemini completion client returning tagged results instead of raising."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from google import genai
from google.genai import errors, types

from logger import logger
from utils.log_sanitizer import sanitize_for_log

# These filter Gemini's response, not the user's message. Hate speech is left
# at the provider default.
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        threshold=types.HarmBlockThreshold.BLOCK_NONE,
    ),
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        threshold=types.HarmBlockThreshold.BLOCK_NONE,
    ),
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        threshold=types.HarmBlockThreshold.BLOCK_NONE,
    ),
]

RATE_LIMIT_STATUS = "RESOURCE_EXHAUSTED"


class CompletionKind(Enum):
    """Outcome of a completion request."""
    OK = "ok"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass
class CompletionResult:
    """Raw model text plus safety ratings, or a classified provider error."""
    kind: CompletionKind
    text: str = ""
    safety_ratings: list[Any] = field(default_factory=list)
    error: Optional[str] = None


def is_rate_limit_error(error: errors.APIError) -> bool:
    """Check whether a provider error is a quota/rate-limit rejection."""
    return error.code == 429 or getattr(error, "status", None) == RATE_LIMIT_STATUS


def _extract_ratings(response: types.GenerateContentResponse) -> list[Any]:
    """Safety ratings of the first candidate, else of the prompt feedback."""
    if response.candidates and response.candidates[0].safety_ratings:
        return list(response.candidates[0].safety_ratings)
    if response.prompt_feedback and response.prompt_feedback.safety_ratings:
        return list(response.prompt_feedback.safety_ratings)
    return []


class GeminiClient:
    """Async Gemini client for single-turn chat completions."""

    def __init__(
        self,
        api_key: str,
        model: str,
        system_instruction: str,
        max_output_tokens: int = 400,
        temperature: Optional[float] = None,
        safety_settings: Optional[list[types.SafetySetting]] = None
    ):
        self.client = genai.Client(api_key=api_key)
        self.model = model
        self.config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            safety_settings=safety_settings if safety_settings is not None else DEFAULT_SAFETY_SETTINGS,
        )

    async def complete(self, prompt: str) -> CompletionResult:
        """
        Send a prompt and return the raw completion.

        Args:
            prompt: User prompt text

        Returns:
            CompletionResult tagged OK, RATE_LIMITED or FAILED. Errors that are
            not provider API errors propagate.
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.config
            )
        except errors.APIError as e:
            message = sanitize_for_log(str(e))
            if is_rate_limit_error(e):
                logger.warning(f"Gemini rate limited: {message}")
                return CompletionResult(kind=CompletionKind.RATE_LIMITED, error=message)

            logger.error(f"Gemini API error: {message}")
            return CompletionResult(kind=CompletionKind.FAILED, error=message)

        return CompletionResult(
            kind=CompletionKind.OK,
            text=response.text or "",
            safety_ratings=_extract_ratings(response)
        )
