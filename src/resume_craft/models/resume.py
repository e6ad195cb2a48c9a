"""Pydantic models for the structured resume record.

The generator is not guaranteed to follow the schema, so every field is
optional and mapped leniently: mistyped values are coerced or dropped instead
of failing validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    return [t for t in (_as_text(v) for v in value) if t is not None]


def _as_entries(value: Any) -> list:
    if isinstance(value, (dict, BaseModel)):
        return [value]
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, (dict, BaseModel))]


class _Lenient(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class EducationEntry(_Lenient):
    institution: str | None = None
    degree: str | None = None
    field: str | None = None
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    score: str | None = None

    @field_validator(
        "institution", "degree", "field", "start_date", "end_date", "score", mode="before"
    )
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return _as_text(v)


class ExperienceEntry(_Lenient):
    company: str | None = None
    role: str | None = None
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    achievements: list[str] = Field(default_factory=list)

    @field_validator("company", "role", "start_date", "end_date", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("achievements", mode="before")
    @classmethod
    def _text_list(cls, v: Any) -> list[str]:
        return _as_text_list(v)


class ProjectEntry(_Lenient):
    name: str | None = None
    description: str | None = None
    technologies: list[str] = Field(default_factory=list)
    impact: str | None = None

    @field_validator("name", "description", "impact", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("technologies", mode="before")
    @classmethod
    def _text_list(cls, v: Any) -> list[str]:
        return _as_text_list(v)


class ResumeRecord(_Lenient):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    location: str | None = None
    professional_summary: str | None = None
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)

    @field_validator(
        "name", "email", "phone", "linkedin", "location", "professional_summary", mode="before"
    )
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("skills", "achievements", "certifications", mode="before")
    @classmethod
    def _text_list(cls, v: Any) -> list[str]:
        return _as_text_list(v)

    @field_validator("education", "experience", "projects", mode="before")
    @classmethod
    def _entries(cls, v: Any) -> list:
        return _as_entries(v)

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> ResumeRecord:
        """Map a loosely-typed parsed JSON object onto the record, field by field."""
        return cls.model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire names, keeping only keys the source provided."""
        return self.model_dump(by_alias=True, exclude_unset=True)

    @property
    def display_name(self) -> str:
        return (self.name or "").strip() or "Resume"
