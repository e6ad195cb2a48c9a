"""Data models for the resume generation pipeline."""

from resume_craft.models.resume import (
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeRecord,
)

__all__ = [
    "EducationEntry",
    "ExperienceEntry",
    "ProjectEntry",
    "ResumeRecord",
]
