"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_craft.clients.llm_client import LLMClient, LLMResponse
from resume_craft.config import AppConfig
from resume_craft.models.resume import ResumeRecord


@pytest.fixture
def sample_prompt() -> str:
    return (
        "Jane Doe, jane@example.com, Berlin. Backend engineer with 6 years at Acme Corp "
        "building Go microservices. BSc Computer Science, TU Berlin 2012-2016. "
        "Led migration to Kubernetes, cut deploy time by 70%. AWS certified."
    )


@pytest.fixture
def sample_resume_dict() -> dict:
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+49 30 1234567",
        "linkedin": "linkedin.com/in/janedoe",
        "location": "Berlin, Germany",
        "professional_summary": "Backend engineer focused on distributed systems.",
        "education": [
            {
                "institution": "TU Berlin",
                "degree": "BSc",
                "field": "Computer Science",
                "startDate": "2012",
                "endDate": "2016",
                "score": "1.7",
            }
        ],
        "skills": ["Go", "Kubernetes", "PostgreSQL"],
        "experience": [
            {
                "company": "Acme Corp",
                "role": "Senior Backend Engineer",
                "startDate": "2018",
                "endDate": "Present",
                "achievements": ["Cut deploy time by 70%", "Led Kubernetes migration"],
            }
        ],
        "projects": [
            {
                "name": "Ledger",
                "description": "Event-sourced accounting service",
                "technologies": ["Go", "Kafka"],
                "impact": "Processes 2M events/day",
            }
        ],
        "achievements": ["Speaker at GopherCon EU"],
        "certifications": ["AWS Solutions Architect"],
    }


@pytest.fixture
def sample_record(sample_resume_dict) -> ResumeRecord:
    return ResumeRecord.from_raw(sample_resume_dict)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(
            text='{"name":"Jane Doe","skills":["Go"]}', input_tokens=100, output_tokens=50
        )
    )
    return client


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(api_key="test-key")
