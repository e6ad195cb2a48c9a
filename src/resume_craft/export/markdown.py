"""Render a ResumeRecord as Markdown (the source for HTML and PDF output)."""

from __future__ import annotations

from resume_craft.models.resume import (
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeRecord,
)


def _date_range(start: str | None, end: str | None) -> str:
    if start and end:
        return f"{start} - {end}"
    return start or end or ""


def _join(*parts: str | None, sep: str = " | ") -> str:
    return sep.join(p for p in parts if p)


def contact_line(record: ResumeRecord) -> str:
    return _join(record.email, record.phone, record.linkedin, record.location)


def education_heading(entry: EducationEntry) -> str:
    degree = _join(entry.degree, entry.field, sep=", ")
    return _join(degree, entry.institution, sep=" - ")


def education_details(entry: EducationEntry) -> str:
    score = f"Score: {entry.score}" if entry.score else ""
    return _join(_date_range(entry.start_date, entry.end_date), score)


def experience_heading(entry: ExperienceEntry) -> str:
    return _join(entry.role, entry.company, sep=" - ")


def project_details(entry: ProjectEntry) -> list[str]:
    lines = []
    if entry.description:
        lines.append(entry.description)
    if entry.technologies:
        lines.append(f"Technologies: {', '.join(entry.technologies)}")
    if entry.impact:
        lines.append(f"Impact: {entry.impact}")
    return lines


def render_markdown(record: ResumeRecord) -> str:
    """Render the record; sections with no content are omitted."""
    out: list[str] = [f"# {record.display_name}"]

    contact = contact_line(record)
    if contact:
        out += ["", contact]

    if record.professional_summary:
        out += ["", "## Professional Summary", "", record.professional_summary]

    if record.education:
        out += ["", "## Education"]
        for edu in record.education:
            out += ["", f"### {education_heading(edu) or 'Education'}"]
            details = education_details(edu)
            if details:
                out += ["", details]

    if record.skills:
        out += ["", "## Skills", "", ", ".join(record.skills)]

    if record.experience:
        out += ["", "## Experience"]
        for exp in record.experience:
            out += ["", f"### {experience_heading(exp) or 'Experience'}"]
            dates = _date_range(exp.start_date, exp.end_date)
            if dates:
                out += ["", dates]
            if exp.achievements:
                out.append("")
                out += [f"- {a}" for a in exp.achievements]

    if record.projects:
        out += ["", "## Projects"]
        for proj in record.projects:
            out += ["", f"### {proj.name or 'Project'}"]
            for line in project_details(proj):
                out += ["", line]

    for label, items in (
        ("Achievements", record.achievements),
        ("Certifications", record.certifications),
    ):
        if items:
            out += ["", f"## {label}", ""]
            out += [f"- {item}" for item in items]

    return "\n".join(out) + "\n"
