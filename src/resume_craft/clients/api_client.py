"""HTTP client for the resume API with a fixed-delay retry policy."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from resume_craft.models.resume import ResumeRecord
from resume_craft.utils.validators import validate_prompt

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY = 1.0  # seconds


class ApiError(Exception):
    """Raised when the resume API still fails after all retries."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retry %d/%d after %s",
        retry_state.attempt_number,
        retry_state.retry_object.stop.max_attempt_number,
        exc,
    )


async def fetch_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay: float = DEFAULT_DELAY,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, retrying every failure after the same fixed delay.

    Transport errors and non-2xx statuses are treated alike. After
    ``max_attempts`` the last failure propagates.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(httpx.HTTPError),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    response: httpx.Response | None = None
    async for attempt in retrying:
        with attempt:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
    return response


def _error_message(exc: httpx.HTTPError) -> tuple[str, int | None]:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"]), response.status_code
        return (response.text or f"HTTP {response.status_code}"), response.status_code
    return str(exc) or type(exc).__name__, None


class ResumeCraftClient:
    """Async consumer of the resume API."""

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        delay: float = DEFAULT_DELAY,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.delay = delay
        self.timeout = timeout
        self._transport = transport
        self._sleep = sleep

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                return await fetch_with_retry(
                    client,
                    method,
                    path,
                    max_attempts=self.max_attempts,
                    delay=self.delay,
                    sleep=self._sleep,
                    **kwargs,
                )
            except httpx.HTTPError as exc:
                message, status = _error_message(exc)
                logger.error("API error on %s %s: %s", method, path, message)
                raise ApiError(message, status) from exc

    async def generate_resume(self, prompt: str) -> ResumeRecord:
        """Validate locally, then ask the server to build a resume record."""
        check = validate_prompt(prompt)
        if not check.valid:
            raise ValueError(check.error)

        response = await self._request("POST", "/api/generate-resume", json={"prompt": prompt})
        result = response.json()
        if not result.get("success"):
            raise ApiError(result.get("error") or "Failed to generate resume", response.status_code)
        return ResumeRecord.from_raw(result.get("data") or {})

    async def download_pdf(self, record: ResumeRecord) -> bytes:
        response = await self._request("POST", "/api/download-pdf", json=record.to_payload())
        return response.content

    async def download_docx(self, record: ResumeRecord) -> bytes:
        response = await self._request("POST", "/api/download-docx", json=record.to_payload())
        return response.content

    async def health(self) -> dict:
        response = await self._request("GET", "/health")
        return response.json()
