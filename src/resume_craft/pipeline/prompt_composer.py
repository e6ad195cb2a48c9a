"""Prompt composer - embeds the user's notes into the resume instruction block."""

from __future__ import annotations

INSTRUCTIONS = """\
You are an expert HR recruiter and resume formatter.

Your task:
- Convert the following unstructured input into a **well-organized JSON resume**.
- The output **must be strictly valid JSON** with no markdown and no explanations.
- Fill in missing but obvious details logically.

Schema:
{
  "name": string,
  "email": string,
  "phone": string,
  "linkedin": string,
  "location": string,
  "professional_summary": string,
  "education": [
    {
      "institution": string,
      "degree": string,
      "field": string,
      "startDate": string,
      "endDate": string,
      "score": string
    }
  ],
  "skills": [string],
  "experience": [
    {
      "company": string,
      "role": string,
      "startDate": string,
      "endDate": string,
      "achievements": [string]
    }
  ],
  "projects": [
    {
      "name": string,
      "description": string,
      "technologies": [string],
      "impact": string
    }
  ],
  "achievements": [string],
  "certifications": [string]
}"""

USER_INPUT_MARKER = "USER INPUT:"
CLOSING_LINE = "Output only valid JSON in the above schema."


def compose_prompt(sanitized_prompt: str) -> str:
    """Build the full generation prompt. The user text is appended verbatim."""
    return f"""{INSTRUCTIONS}

{USER_INPUT_MARKER}
{sanitized_prompt}

{CLOSING_LINE}
"""
