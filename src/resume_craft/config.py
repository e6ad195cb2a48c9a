"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import yaml

from resume_craft.errors import ConfigError

API_KEY_ENV = "ANTHROPIC_API_KEY"
PRODUCTION = "production"


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 4096
    temperature: float = 0.0
    # seconds; None keeps the SDK default
    timeout: float | None = 120.0

    def __post_init__(self):
        if self.timeout is not None and self.timeout < 1:
            raise ValueError(f"llm.timeout must be >= 1 second, got {self.timeout}")
        if self.max_tokens < 1:
            raise ValueError(f"llm.max_tokens must be positive, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"llm.temperature must be within [0, 1], got {self.temperature}")


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "development"

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"server.port must be within 1-65535, got {self.port}")

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION


@dataclass(frozen=True)
class RateLimitConfig:
    window_seconds: int = 15 * 60
    production_max_requests: int = 30
    development_max_requests: int = 1000

    def __post_init__(self):
        if self.window_seconds < 1:
            raise ValueError(f"rate_limit.window_seconds must be >= 1, got {self.window_seconds}")
        if self.production_max_requests < 1 or self.development_max_requests < 1:
            raise ValueError("rate_limit max_requests values must be >= 1")

    def max_requests(self, production: bool) -> int:
        return self.production_max_requests if production else self.development_max_requests


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = "http://localhost:5000"
    max_attempts: int = 3
    retry_delay: float = 1.0
    timeout: float = 180.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"client.max_attempts must be >= 1, got {self.max_attempts}")
        if self.retry_delay < 0:
            raise ValueError(f"client.retry_delay must be >= 0, got {self.retry_delay}")


@dataclass(frozen=True)
class AppConfig:
    api_key: str | None = field(default=None, repr=False)
    llm: LLMConfig = field(default_factory=LLMConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    client: ClientConfig = field(default_factory=ClientConfig)

    def require_api_key(self) -> str:
        """Return the generation service credential or fail startup."""
        if not self.api_key:
            raise ConfigError(f"{API_KEY_ENV} is missing in environment variables.")
        return self.api_key


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load config from YAML file and environment, falling back to defaults."""
    if env is None:
        env = os.environ

    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    server_raw = dict(raw.get("server", {}))
    if env.get("PORT"):
        server_raw["port"] = int(env["PORT"])
    if env.get("APP_ENV"):
        server_raw["environment"] = env["APP_ENV"]

    return AppConfig(
        api_key=env.get(API_KEY_ENV) or None,
        llm=LLMConfig(**raw.get("llm", {})),
        server=ServerConfig(**server_raw),
        rate_limit=RateLimitConfig(**raw.get("rate_limit", {})),
        client=ClientConfig(**raw.get("client", {})),
    )
