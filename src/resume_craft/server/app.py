"""FastAPI application: resume generation, exports, health."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from resume_craft.clients.llm_client import LLMClient
from resume_craft.config import AppConfig, load_config
from resume_craft.export import DOCX_MEDIA_TYPE, render_docx, render_pdf
from resume_craft.models.resume import ResumeRecord
from resume_craft.pipeline.orchestrator import (
    GENERIC_FAILURE_MESSAGE,
    Generator,
    ResumeOrchestrator,
)
from resume_craft.server.faults import loop_exception_handler
from resume_craft.server.rate_limit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again in 15 minutes."
SERVICE_UNAVAILABLE_MESSAGE = "AI service temporarily unavailable. Please try again later."

# Uncaught errors mentioning these are reported as an unavailable upstream.
_UPSTREAM_MARKERS = ("API", "Anthropic")

router = APIRouter()


def package_version() -> str:
    try:
        return version("resume-craft")
    except PackageNotFoundError:
        return "unknown"


async def _read_json(request: Request) -> Any:
    """Parsed JSON body, or None when the body is missing or not JSON."""
    try:
        return await request.json()
    except ValueError:
        return None


def _attachment(filename: str) -> dict[str, str]:
    safe = re.sub(r"[^A-Za-z0-9._ -]", "", filename).strip() or "Resume"
    return {"Content-Disposition": f'attachment; filename="{safe}"'}


@router.post("/api/generate-resume")
async def generate_resume(request: Request) -> JSONResponse:
    body = await _read_json(request)
    result = await request.app.state.orchestrator.handle(body)
    return JSONResponse(result.payload, status_code=result.status_code)


async def _record_from_body(request: Request) -> ResumeRecord | None:
    body = await _read_json(request)
    if not isinstance(body, dict):
        return None
    return ResumeRecord.from_raw(body)


@router.post("/api/download-pdf")
async def download_pdf(request: Request) -> Response:
    record = await _record_from_body(request)
    if record is None:
        return PlainTextResponse("Request body must be a resume object", status_code=400)
    try:
        pdf = await run_in_threadpool(render_pdf, record)
    except Exception:
        logger.error("PDF generation failed", exc_info=True)
        return PlainTextResponse("Failed to generate PDF", status_code=500)
    return Response(
        pdf,
        media_type="application/pdf",
        headers=_attachment(f"{record.display_name}.pdf"),
    )


@router.post("/api/download-docx")
async def download_docx(request: Request) -> Response:
    record = await _record_from_body(request)
    if record is None:
        return PlainTextResponse("Request body must be a resume object", status_code=400)
    try:
        docx = await run_in_threadpool(render_docx, record)
    except Exception:
        logger.error("DOCX generation failed", exc_info=True)
        return PlainTextResponse("Failed to generate DOCX", status_code=500)
    return Response(docx, media_type=DOCX_MEDIA_TYPE, headers=_attachment("resume.docx"))


@router.get("/health")
async def health(request: Request) -> dict:
    state = request.app.state
    return {
        "status": "Server running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - state.started_at, 3),
        "version": package_version(),
        "environment": state.config.server.environment,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    asyncio.get_running_loop().set_exception_handler(loop_exception_handler)
    config: AppConfig = app.state.config
    logger.info(
        "ResumeCraft API starting (environment=%s, version=%s)",
        config.server.environment,
        package_version(),
    )
    yield
    logger.info("ResumeCraft API shutting down")


def create_app(config: AppConfig, generator: Generator | None = None) -> FastAPI:
    """Build the API. Without an injected generator the API key is mandatory."""
    if generator is None:
        generator = LLMClient(
            api_key=config.require_api_key(),
            timeout=config.llm.timeout,
            model=config.llm.model,
            max_tokens=config.llm.max_tokens,
            temperature=config.llm.temperature,
        )

    production = config.server.is_production
    app = FastAPI(
        title="ResumeCraft API",
        version=package_version(),
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.started_at = time.monotonic()
    app.state.orchestrator = ResumeOrchestrator(generator, expose_errors=not production)
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=config.rate_limit.max_requests(production),
        window_seconds=config.rate_limit.window_seconds,
    )
    app.include_router(router)

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        client_id = request.client.host if request.client else "unknown"
        decision = request.app.state.rate_limiter.hit(client_id)
        headers = {
            "RateLimit-Limit": str(decision.limit),
            "RateLimit-Remaining": str(decision.remaining),
            "RateLimit-Reset": str(max(0, int(decision.reset_at - time.time()))),
        }
        if not decision.allowed:
            logger.warning("Rate limit exceeded for IP: %s", client_id)
            return JSONResponse(
                {
                    "success": False,
                    "error": RATE_LIMIT_MESSAGE,
                    "retryAfter": datetime.fromtimestamp(
                        decision.reset_at, timezone.utc
                    ).isoformat(),
                },
                status_code=429,
                headers=headers,
            )
        response = await call_next(request)
        response.headers.update(headers)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse(
                {
                    "success": False,
                    "error": f"Route {request.method} {request.url.path} not found",
                },
                status_code=404,
            )
        return JSONResponse({"success": False, "error": str(exc.detail)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
        )
        detail = str(exc)
        if any(marker in detail for marker in _UPSTREAM_MARKERS):
            return JSONResponse(
                {"success": False, "error": SERVICE_UNAVAILABLE_MESSAGE}, status_code=503
            )
        message = GENERIC_FAILURE_MESSAGE if production else (detail or GENERIC_FAILURE_MESSAGE)
        return JSONResponse({"success": False, "error": message}, status_code=500)

    logger.info("Routes configured")
    return app


def create_app_from_env() -> FastAPI:
    """Factory for ``uvicorn --factory``: reads .env, config.yaml and env vars."""
    load_dotenv()
    return create_app(load_config())
