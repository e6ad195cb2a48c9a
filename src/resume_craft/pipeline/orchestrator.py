"""Request orchestrator - validation, composition, generation, extraction."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

from resume_craft.clients.llm_client import LLMResponse
from resume_craft.errors import (
    ErrorCode,
    ExtractionError,
    InputError,
    ResumeCraftError,
    UpstreamServiceError,
)
from resume_craft.pipeline.extractor import extract_resume
from resume_craft.pipeline.prompt_composer import compose_prompt
from resume_craft.utils.validators import (
    sanitize_input,
    validate_prompt,
    validate_request_body,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Resume generated successfully"
CONFIG_ERROR_MESSAGE = "Server configuration error. Please contact support."
INVALID_FORMAT_MESSAGE = "Invalid input format for resume generation"
THROTTLED_MESSAGE = "Too many requests. Please try again in a few moments."
GENERIC_FAILURE_MESSAGE = "Failed to generate resume. Please try again."
INTERNAL_ERROR_MESSAGE = "Internal server error"

# Fallback for errors that carry no code (e.g. raised by a third-party
# generator): matched against the message, first hit wins.
_UNTAGGED_RULES: tuple[tuple[str, ErrorCode], ...] = (
    ("API key", ErrorCode.AUTHENTICATION),
    ("invalid request", ErrorCode.INVALID_REQUEST),
    ("Rate limit", ErrorCode.RATE_LIMITED),
)

_CODE_OUTCOMES: dict[ErrorCode, tuple[int, str]] = {
    ErrorCode.AUTHENTICATION: (500, CONFIG_ERROR_MESSAGE),
    ErrorCode.INVALID_REQUEST: (400, INVALID_FORMAT_MESSAGE),
    ErrorCode.RATE_LIMITED: (429, THROTTLED_MESSAGE),
}


class Generator(Protocol):
    async def generate(self, prompt: str) -> LLMResponse: ...


@dataclass
class HandlerResponse:
    """HTTP-facing outcome of one generation request."""

    status_code: int
    payload: dict[str, Any]

    @property
    def success(self) -> bool:
        return bool(self.payload.get("success"))


def _error_code(exc: BaseException) -> ErrorCode | None:
    if isinstance(exc, ResumeCraftError):
        return exc.code
    message = str(exc)
    for needle, code in _UNTAGGED_RULES:
        if needle in message:
            return code
    return None


def classify_error(exc: BaseException, expose_errors: bool = True) -> tuple[int, str]:
    """Map a pipeline failure to ``(status_code, user_message)``. Never raises."""
    try:
        if isinstance(exc, InputError):
            return 400, exc.message

        code = _error_code(exc)
        if code in _CODE_OUTCOMES:
            return _CODE_OUTCOMES[code]

        message = str(exc)
        if isinstance(exc, (UpstreamServiceError, ExtractionError)):
            return 500, message or GENERIC_FAILURE_MESSAGE
        if not expose_errors or not message:
            return 500, GENERIC_FAILURE_MESSAGE
        return 500, message
    except Exception:
        logger.critical("Error classifier failed", exc_info=True)
        return 500, INTERNAL_ERROR_MESSAGE


class ResumeOrchestrator:
    """Runs one resume generation request from raw body to HTTP outcome."""

    def __init__(self, generator: Generator, *, expose_errors: bool = True):
        self.generator = generator
        self.expose_errors = expose_errors

    async def handle(self, body: Any) -> HandlerResponse:
        """Validate, compose, generate and extract; any failure short-circuits."""
        start = time.monotonic()
        logger.info("New resume generation request")
        try:
            body_check = validate_request_body(body)
            if not body_check.valid:
                logger.warning("Invalid request body: %s", body_check.error)
                body_check.raise_for_error()

            prompt = sanitize_input(body["prompt"])
            logger.info("Received prompt (%d chars)", len(prompt))

            prompt_check = validate_prompt(prompt)
            if not prompt_check.valid:
                logger.warning("Prompt validation failed: %s", prompt_check.error)
                prompt_check.raise_for_error()
            logger.info("Input validation passed")

            response = await self.generator.generate(compose_prompt(prompt))
            logger.info("Generation service replied (%d chars)", len(response.text))

            record = extract_resume(response.text)
        except Exception as exc:
            elapsed_ms = _elapsed_ms(start)
            status, message = classify_error(exc, self.expose_errors)
            log = logger.warning if status < 500 else logger.error
            log(
                "Resume generation failed after %dms (%s: %s) -> %d",
                elapsed_ms,
                type(exc).__name__,
                exc,
                status,
            )
            return HandlerResponse(status, {"success": False, "error": message})

        elapsed_ms = _elapsed_ms(start)
        logger.info("Request completed in %dms", elapsed_ms)
        return HandlerResponse(
            200,
            {
                "success": True,
                "data": record.to_payload(),
                "message": SUCCESS_MESSAGE,
                "processingTime": f"{elapsed_ms}ms",
            },
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
