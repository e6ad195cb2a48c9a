"""Tests for input sanitization and validation."""

import pytest

from resume_craft.errors import ErrorCode, InputError
from resume_craft.utils.validators import (
    MAX_PROMPT_LENGTH,
    MIN_PROMPT_LENGTH,
    ValidationResult,
    sanitize_input,
    validate_prompt,
    validate_request_body,
)


class TestSanitizeInput:
    @pytest.mark.parametrize(
        "char,entity",
        [("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ('"', "&quot;"), ("'", "&#x27;")],
    )
    def test_escapes_each_metacharacter(self, char, entity):
        assert sanitize_input(f"a{char}b{char}c") == f"a{entity}b{entity}c"

    def test_escapes_ampersand_only_once(self):
        assert sanitize_input("<b>") == "&lt;b&gt;"

    def test_double_escaping_is_not_prevented(self):
        assert sanitize_input(sanitize_input("&")) == "&amp;amp;"

    def test_leaves_slash_alone(self):
        assert sanitize_input("CI/CD") == "CI/CD"

    @pytest.mark.parametrize("value", [None, 42, ["a"], {"prompt": "x"}])
    def test_non_string_becomes_empty(self, value):
        assert sanitize_input(value) == ""


class TestValidatePrompt:
    def test_none_is_empty_input(self):
        result = validate_prompt(None)
        assert not result.valid
        assert result.code is ErrorCode.EMPTY_INPUT

    def test_non_string(self):
        result = validate_prompt(123)
        assert result.code is ErrorCode.NOT_A_STRING
        assert result.error == "Prompt must be a string"

    def test_whitespace_only_is_empty(self):
        result = validate_prompt("   \n\t ")
        assert result.code is ErrorCode.EMPTY_INPUT
        assert result.error == "Prompt cannot be empty"

    @pytest.mark.parametrize("length", [1, 10, 25, 49])
    def test_too_short_reports_current_length(self, length):
        result = validate_prompt("  " + "a" * length + "  ")
        assert result.code is ErrorCode.TOO_SHORT
        assert f"Minimum {MIN_PROMPT_LENGTH}" in result.error
        assert result.error.endswith(f"Current: {length}")

    def test_too_long_reports_max_and_length(self):
        result = validate_prompt("a" * 5001)
        assert result.code is ErrorCode.TOO_LONG
        assert f"Maximum {MAX_PROMPT_LENGTH}" in result.error
        assert "Current: 5001" in result.error

    @pytest.mark.parametrize("length", [50, 51, 1000, 5000])
    def test_valid_lengths(self, length):
        assert validate_prompt("x" * length).valid

    def test_no_alphanumeric(self):
        result = validate_prompt("!" * 60)
        assert result.code is ErrorCode.NO_ALPHANUMERIC

    def test_length_check_precedes_content_check(self):
        result = validate_prompt("!" * 10)
        assert result.code is ErrorCode.TOO_SHORT

    def test_non_ascii_letters_do_not_count(self):
        result = validate_prompt("é" * 60)
        assert result.code is ErrorCode.NO_ALPHANUMERIC

    def test_single_digit_is_enough(self):
        assert validate_prompt("-" * 59 + "7").valid


class TestValidateRequestBody:
    @pytest.mark.parametrize("body", [None, "prompt", 5, ["prompt"]])
    def test_not_an_object(self, body):
        result = validate_request_body(body)
        assert result.code is ErrorCode.NOT_AN_OBJECT

    def test_missing_prompt(self):
        result = validate_request_body({"text": "hello"})
        assert result.code is ErrorCode.MISSING_FIELD
        assert "'prompt'" in result.error

    def test_null_prompt_passes_shape_check(self):
        assert validate_request_body({"prompt": None}).valid


class TestValidationResult:
    def test_raise_for_error(self):
        result = ValidationResult.fail(ErrorCode.TOO_LONG, "too long")
        with pytest.raises(InputError, match="too long") as exc_info:
            result.raise_for_error()
        assert exc_info.value.code is ErrorCode.TOO_LONG

    def test_ok_does_not_raise(self):
        ValidationResult.ok().raise_for_error()
