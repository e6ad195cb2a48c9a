"""Tests for the request orchestrator and error classification."""

import re
from unittest.mock import AsyncMock

import pytest

from resume_craft.clients.llm_client import LLMResponse
from resume_craft.errors import (
    ErrorCode,
    ExtractionError,
    InputError,
    UpstreamServiceError,
)
from resume_craft.pipeline.orchestrator import (
    CONFIG_ERROR_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    INVALID_FORMAT_MESSAGE,
    SUCCESS_MESSAGE,
    THROTTLED_MESSAGE,
    HandlerResponse,
    ResumeOrchestrator,
    classify_error,
)
from resume_craft.pipeline.prompt_composer import USER_INPUT_MARKER


class TestHandle:
    async def test_success(self, mock_llm_client, sample_prompt):
        orchestrator = ResumeOrchestrator(mock_llm_client)
        result = await orchestrator.handle({"prompt": sample_prompt})

        assert isinstance(result, HandlerResponse)
        assert result.status_code == 200
        assert result.success
        assert result.payload["data"] == {"name": "Jane Doe", "skills": ["Go"]}
        assert result.payload["message"] == SUCCESS_MESSAGE
        assert result.payload["processingTime"].endswith("ms")

    async def test_generator_receives_sanitized_composed_prompt(self, mock_llm_client):
        prompt = "Built <api> & tools for 'Acme' over five years as a senior engineer."
        await ResumeOrchestrator(mock_llm_client).handle({"prompt": prompt})

        sent = mock_llm_client.generate.call_args.args[0]
        assert USER_INPUT_MARKER in sent
        assert "Built &lt;api&gt; &amp; tools for &#x27;Acme&#x27;" in sent
        assert "<api>" not in sent

    async def test_missing_prompt_never_reaches_generator(self, mock_llm_client):
        result = await ResumeOrchestrator(mock_llm_client).handle({"text": "x"})

        assert result.status_code == 400
        assert result.payload == {
            "success": False,
            "error": "Request must include 'prompt' field",
        }
        mock_llm_client.generate.assert_not_called()

    async def test_non_object_body(self, mock_llm_client):
        result = await ResumeOrchestrator(mock_llm_client).handle(["prompt"])
        assert result.status_code == 400
        assert result.payload["error"] == "Request body must be an object"

    async def test_null_prompt_is_sanitized_to_empty(self, mock_llm_client):
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": None})
        assert result.status_code == 400
        assert result.payload["error"] == "Prompt cannot be empty"

    async def test_short_prompt(self, mock_llm_client):
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": "too short"})
        assert result.status_code == 400
        assert "Current: 9" in result.payload["error"]
        mock_llm_client.generate.assert_not_called()

    async def test_length_is_measured_after_sanitizing(self, mock_llm_client):
        # 45 characters, 61 once the four ampersands are escaped
        prompt = "a&b&c&d&" + "x" * 37
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": prompt})
        assert result.status_code == 200

    async def test_rate_limited_upstream(self, mock_llm_client, sample_prompt):
        mock_llm_client.generate.side_effect = UpstreamServiceError(
            "Rate limit reached", code=ErrorCode.RATE_LIMITED
        )
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": sample_prompt})
        assert result.status_code == 429
        assert result.payload["error"] == THROTTLED_MESSAGE

    async def test_untagged_rate_limit_message(self, mock_llm_client, sample_prompt):
        mock_llm_client.generate.side_effect = RuntimeError("Rate limit exceeded for project")
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": sample_prompt})
        assert result.status_code == 429

    async def test_unparsable_output(self, mock_llm_client, sample_prompt):
        mock_llm_client.generate.return_value = LLMResponse(
            text="I could not do that.", input_tokens=1, output_tokens=1
        )
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": sample_prompt})
        assert result.status_code == 500
        assert result.payload["error"] == "Generation service returned no JSON object."

    async def test_elapsed_time_is_reported(self, mock_llm_client, sample_prompt):
        result = await ResumeOrchestrator(mock_llm_client).handle({"prompt": sample_prompt})
        assert re.fullmatch(r"\d+ms", result.payload["processingTime"])

    async def test_unexpected_error_hidden_when_not_exposed(self, sample_prompt):
        generator = AsyncMock()
        generator.generate.side_effect = KeyError("secret internal detail")
        result = await ResumeOrchestrator(generator, expose_errors=False).handle(
            {"prompt": sample_prompt}
        )
        assert result.status_code == 500
        assert result.payload["error"] == GENERIC_FAILURE_MESSAGE


class TestClassifyError:
    def test_input_error(self):
        assert classify_error(InputError("Prompt too short")) == (400, "Prompt too short")

    @pytest.mark.parametrize(
        "code,expected",
        [
            (ErrorCode.AUTHENTICATION, (500, CONFIG_ERROR_MESSAGE)),
            (ErrorCode.INVALID_REQUEST, (400, INVALID_FORMAT_MESSAGE)),
            (ErrorCode.RATE_LIMITED, (429, THROTTLED_MESSAGE)),
        ],
    )
    def test_tagged_upstream(self, code, expected):
        assert classify_error(UpstreamServiceError("whatever", code=code)) == expected

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Missing API key", (500, CONFIG_ERROR_MESSAGE)),
            ("upstream said invalid request", (400, INVALID_FORMAT_MESSAGE)),
            ("Rate limit hit", (429, THROTTLED_MESSAGE)),
            ("API key and Rate limit", (500, CONFIG_ERROR_MESSAGE)),
        ],
    )
    def test_untagged_messages_first_rule_wins(self, message, expected):
        assert classify_error(RuntimeError(message)) == expected

    def test_tag_beats_message_text(self):
        exc = UpstreamServiceError("Rate limit mentioned", code=ErrorCode.UNAVAILABLE)
        assert classify_error(exc) == (500, "Rate limit mentioned")

    def test_extraction_error_keeps_message(self):
        exc = ExtractionError("Failed to parse", raw_text="{")
        assert classify_error(exc, expose_errors=False) == (500, "Failed to parse")

    def test_other_error_message_exposed(self):
        assert classify_error(ValueError("boom")) == (500, "boom")

    def test_other_error_without_message(self):
        assert classify_error(ValueError()) == (500, GENERIC_FAILURE_MESSAGE)

    def test_classifier_never_raises(self):
        class Broken(Exception):
            def __str__(self):
                raise RuntimeError("cannot render")

        assert classify_error(Broken()) == (500, INTERNAL_ERROR_MESSAGE)
