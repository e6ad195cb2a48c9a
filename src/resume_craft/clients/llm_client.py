"""Claude API wrapper with async support, retry logic, and error tagging."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import anthropic
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from resume_craft.errors import ErrorCode, InputError, UpstreamServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

# Probed in order; the first non-empty string wins.
_TEXT_PROBES: tuple[tuple[str | int, ...], ...] = (
    ("output_text",),
    ("content", 0, "text"),
    ("message", "content", 0, "text"),
)

_TRANSIENT_ERRORS = (anthropic.APIConnectionError, anthropic.InternalServerError)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


def _dig(obj: Any, path: tuple[str | int, ...]) -> Any:
    for key in path:
        if obj is None:
            return None
        if isinstance(key, int):
            try:
                obj = obj[key]
            except (IndexError, KeyError, TypeError):
                return None
        elif isinstance(obj, dict):
            obj = obj.get(key)
        else:
            obj = getattr(obj, key, None)
    return obj


def extract_response_text(response: Any) -> str:
    """Return the first non-empty text found by the response-shape probes."""
    for path in _TEXT_PROBES:
        value = _dig(response, path)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _translate_api_error(exc: anthropic.APIError) -> UpstreamServiceError:
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return UpstreamServiceError(
            f"Generation service rejected the API key: {exc}",
            code=ErrorCode.AUTHENTICATION,
        )
    if isinstance(exc, anthropic.BadRequestError):
        return UpstreamServiceError(
            f"Generation service reported an invalid request: {exc}",
            code=ErrorCode.INVALID_REQUEST,
        )
    if isinstance(exc, anthropic.RateLimitError):
        return UpstreamServiceError(
            f"Rate limit reached on generation service: {exc}",
            code=ErrorCode.RATE_LIMITED,
        )
    return UpstreamServiceError(
        f"Generation service unavailable: {exc}",
        code=ErrorCode.UNAVAILABLE,
    )


class LLMClient:
    """Async Claude API client bound to a single model."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _call_api(self, prompt: str) -> Any:
        """Make the actual API call with retry logic."""
        return await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )

    async def generate(self, prompt: str) -> LLMResponse:
        """Send a composed prompt and return the raw text output with usage."""
        if not isinstance(prompt, str) or not prompt.strip():
            raise InputError(
                "Invalid prompt: must be a non-empty string", code=ErrorCode.EMPTY_PROMPT
            )

        logger.info("Sending prompt to generation service (model=%s)", self.model)
        try:
            message = await self._call_api(prompt)
        except anthropic.APIError as exc:
            logger.error("LLM call failed", exc_info=True)
            raise _translate_api_error(exc) from exc

        text = extract_response_text(message)
        if not text.strip():
            logger.error("Generation service returned empty text: %r", message)
            raise UpstreamServiceError(
                "Generation service returned no readable text output.",
                code=ErrorCode.EMPTY_GENERATION,
            )

        input_tokens = _dig(message, ("usage", "input_tokens")) or 0
        output_tokens = _dig(message, ("usage", "output_tokens")) or 0
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((self.model, input_tokens, output_tokens))
        return LLMResponse(text=text, input_tokens=input_tokens, output_tokens=output_tokens)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
