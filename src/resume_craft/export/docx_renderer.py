"""DOCX output renderer - builds an editable Word resume from a record."""

from __future__ import annotations

from io import BytesIO

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from resume_craft.export.markdown import (
    contact_line,
    education_details,
    education_heading,
    experience_heading,
    project_details,
)
from resume_craft.models.resume import ResumeRecord

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def render_docx(record: ResumeRecord) -> bytes:
    """Generate a clean .docx from the resume record and return its bytes."""
    doc = Document()

    # Set default font
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(10.5)

    title = doc.add_heading(record.display_name, level=0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    contact = contact_line(record)
    if contact:
        p = doc.add_paragraph(contact)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    if record.professional_summary:
        _section_heading(doc, "Professional Summary")
        doc.add_paragraph(record.professional_summary)

    if record.education:
        _section_heading(doc, "Education")
        for edu in record.education:
            _entry(doc, education_heading(edu) or "Education", education_details(edu))

    if record.skills:
        _section_heading(doc, "Skills")
        doc.add_paragraph(", ".join(record.skills))

    if record.experience:
        _section_heading(doc, "Experience")
        for exp in record.experience:
            dates = " - ".join(d for d in (exp.start_date, exp.end_date) if d)
            _entry(doc, experience_heading(exp) or "Experience", dates)
            _bullets(doc, exp.achievements)

    if record.projects:
        _section_heading(doc, "Projects")
        for proj in record.projects:
            _entry(doc, proj.name or "Project", "")
            for line in project_details(proj):
                doc.add_paragraph(line)

    if record.achievements:
        _section_heading(doc, "Achievements")
        _bullets(doc, record.achievements)

    if record.certifications:
        _section_heading(doc, "Certifications")
        _bullets(doc, record.certifications)

    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _section_heading(doc: Document, label: str) -> None:
    heading = doc.add_heading(label, level=2)
    heading.runs[0].font.color.rgb = RGBColor(0x1A, 0x1A, 0x1A)


def _entry(doc: Document, heading: str, details: str) -> None:
    """Bold entry title, with an optional detail line (dates, score)."""
    p = doc.add_paragraph()
    p.add_run(heading).bold = True
    if details:
        detail_run = p.add_run(f"\n{details}")
        detail_run.italic = True


def _bullets(doc: Document, items: list[str]) -> None:
    for item in items:
        doc.add_paragraph(item, style="List Bullet")
