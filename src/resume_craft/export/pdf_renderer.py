from __future__ import annotations

import logging
from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from resume_craft.export.markdown import render_markdown
from resume_craft.export.pdf_writer import html_to_pdf
from resume_craft.models.resume import ResumeRecord

logger = logging.getLogger(__name__)

BASE_TEMPLATE_DIR = Path(__file__).parent


def render_pdf(record: ResumeRecord) -> bytes:
    """Convert a resume record to PDF bytes."""
    html = render_html_preview(record)
    pdf = html_to_pdf(html)
    logger.debug("Rendered PDF for %s (%d bytes)", record.display_name, len(pdf))
    return pdf


def render_html_preview(record: ResumeRecord, title: str | None = None) -> str:
    """Convert a resume record to a standalone HTML page."""
    return _md_to_html(render_markdown(record), title or record.display_name)


def _md_to_html(md_text: str, title: str) -> str:
    md = markdown.Markdown(extensions=["nl2br"])
    # Record text is model output: raw HTML in it is rendered as text.
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    html_body = md.convert(md_text)
    env = Environment(
        loader=FileSystemLoader(str(BASE_TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template("base.html")
    return template.render(title=title, body=Markup(html_body))
