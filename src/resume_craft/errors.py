"""Error taxonomy shared by every pipeline stage.

Each stage raises a tagged error; ``pipeline.orchestrator.classify_error`` is
the single place that turns them into HTTP statuses.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    # request / prompt validation
    EMPTY_INPUT = "empty_input"
    NOT_A_STRING = "not_a_string"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    NO_ALPHANUMERIC = "no_alphanumeric"
    NOT_AN_OBJECT = "not_an_object"
    MISSING_FIELD = "missing_field"
    EMPTY_PROMPT = "empty_prompt"

    # generation service
    AUTHENTICATION = "authentication"
    INVALID_REQUEST = "invalid_request"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    EMPTY_GENERATION = "empty_generation"

    # extraction
    NO_JSON_FOUND = "no_json_found"
    MALFORMED_JSON = "malformed_json"

    INTERNAL = "internal"


class ResumeCraftError(Exception):
    """Base class for all tagged pipeline errors."""

    default_code = ErrorCode.INTERNAL

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class InputError(ResumeCraftError):
    """Malformed, missing or out-of-range user input. Safe to show to the caller."""

    default_code = ErrorCode.EMPTY_INPUT


class UpstreamServiceError(ResumeCraftError):
    """The generation service failed, refused, or returned nothing usable."""

    default_code = ErrorCode.UNAVAILABLE


class ExtractionError(ResumeCraftError):
    """The generation service replied but the reply held no usable JSON."""

    default_code = ErrorCode.MALFORMED_JSON

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        raw_text: str = "",
    ):
        super().__init__(message, code=code)
        self.raw_text = raw_text


class InternalError(ResumeCraftError):
    """Unexpected failure inside the service itself."""


class ConfigError(ValueError):
    """Raised at startup when required configuration is missing or invalid."""
