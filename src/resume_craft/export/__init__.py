"""PDF, Word and HTML export for resume records."""
from resume_craft.export.docx_renderer import DOCX_MEDIA_TYPE, render_docx
from resume_craft.export.markdown import render_markdown
from resume_craft.export.pdf_renderer import render_html_preview, render_pdf

__all__ = [
    "DOCX_MEDIA_TYPE",
    "render_docx",
    "render_html_preview",
    "render_markdown",
    "render_pdf",
]
