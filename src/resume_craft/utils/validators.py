"""Request-shape and prompt validation, plus markup sanitization."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from resume_craft.errors import ErrorCode, InputError

logger = logging.getLogger(__name__)

MIN_PROMPT_LENGTH = 50
MAX_PROMPT_LENGTH = 5000

# Order matters: "&" first so later entities are not double-escaped.
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
)

_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None
    code: ErrorCode | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, code: ErrorCode, error: str) -> ValidationResult:
        return cls(valid=False, error=error, code=code)

    def raise_for_error(self) -> None:
        """Raise InputError if this result is a failure."""
        if not self.valid:
            raise InputError(self.error or "Invalid input", code=self.code)


def sanitize_input(value: Any) -> str:
    """Escape HTML metacharacters. Non-string input becomes an empty string."""
    if not isinstance(value, str):
        return ""
    for char, entity in _HTML_ESCAPES:
        value = value.replace(char, entity)
    return value


def validate_prompt(prompt: Any) -> ValidationResult:
    """Check a resume prompt; only the first failing check is reported."""
    if prompt is None:
        return ValidationResult.fail(ErrorCode.EMPTY_INPUT, "Prompt cannot be null")

    if not isinstance(prompt, str):
        return ValidationResult.fail(ErrorCode.NOT_A_STRING, "Prompt must be a string")

    trimmed = prompt.strip()
    length = len(trimmed)

    if length == 0:
        return ValidationResult.fail(ErrorCode.EMPTY_INPUT, "Prompt cannot be empty")

    if length < MIN_PROMPT_LENGTH:
        return ValidationResult.fail(
            ErrorCode.TOO_SHORT,
            f"Prompt too short. Minimum {MIN_PROMPT_LENGTH} characters required. "
            f"Current: {length}",
        )

    if length > MAX_PROMPT_LENGTH:
        return ValidationResult.fail(
            ErrorCode.TOO_LONG,
            f"Prompt too long. Maximum {MAX_PROMPT_LENGTH} characters allowed. "
            f"Current: {length}",
        )

    if not _ALPHANUMERIC.search(trimmed):
        return ValidationResult.fail(
            ErrorCode.NO_ALPHANUMERIC, "Prompt must contain alphanumeric characters"
        )

    return ValidationResult.ok()


def validate_request_body(body: Any) -> ValidationResult:
    """Check the payload shape only; the prompt value is validated later."""
    if not isinstance(body, dict):
        return ValidationResult.fail(ErrorCode.NOT_AN_OBJECT, "Request body must be an object")

    if "prompt" not in body:
        return ValidationResult.fail(
            ErrorCode.MISSING_FIELD, "Request must include 'prompt' field"
        )

    return ValidationResult.ok()
