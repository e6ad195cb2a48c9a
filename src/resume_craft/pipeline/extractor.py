"""Response extractor - turns raw model output into a ResumeRecord."""

from __future__ import annotations

from resume_craft.models.resume import ResumeRecord
from resume_craft.utils.json_parser import extract_json


def extract_resume(raw: str) -> ResumeRecord:
    """Parse the JSON object in ``raw`` and map it onto a ResumeRecord.

    No schema is enforced beyond a successful parse: fields may be absent,
    extra, or mistyped, and are mapped best-effort.
    """
    return ResumeRecord.from_raw(extract_json(raw))
