"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from resume_craft.clients.api_client import ApiError, ResumeCraftClient
from resume_craft.config import load_config
from resume_craft.errors import ConfigError
from resume_craft.export import render_docx, render_html_preview, render_markdown, render_pdf
from resume_craft.models.resume import ResumeRecord
from resume_craft.server.app import create_app
from resume_craft.server.faults import install_fault_handlers

app = typer.Typer(
    name="resume-craft",
    help="Turn free-form career notes into a structured resume.",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _client(api_url: str | None) -> ResumeCraftClient:
    config = load_config()
    return ResumeCraftClient(
        api_url or config.client.api_url,
        max_attempts=config.client.max_attempts,
        delay=config.client.retry_delay,
        timeout=config.client.timeout,
    )


def _write_bytes(path: Path, data: bytes, label: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    console.print(f"[green]{label} saved: {path}[/green]")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config / PORT)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run the resume API server."""
    _configure_logging(verbose)
    install_fault_handlers()
    config = load_config()
    try:
        api = create_app(config)
    except ConfigError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    host = host or config.server.host
    port = port or config.server.port
    console.print(
        Panel(
            f"Environment: {config.server.environment}\n"
            f"API endpoint: POST http://{host}:{port}/api/generate-resume\n"
            f"Health check: GET http://{host}:{port}/health",
            title="ResumeCraft",
        )
    )
    uvicorn.run(api, host=host, port=port, log_config=None)


@app.command()
def generate(
    prompt_file: Path = typer.Argument(help="Text file with free-form career notes"),
    api_url: str = typer.Option(None, "--api-url", help="Base URL of a running server"),
    output: Path = typer.Option(None, "--output", "-o", help="Where to save the resume JSON"),
    pdf: Path = typer.Option(None, "--pdf", help="Also download a PDF to this path"),
    docx: Path = typer.Option(None, "--docx", help="Also download a Word file to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate a structured resume through a running server."""
    _configure_logging(verbose)
    if not prompt_file.exists():
        console.print(f"[red]Prompt file not found: {prompt_file}[/red]")
        raise typer.Exit(1)

    prompt = prompt_file.read_text(encoding="utf-8")
    client = _client(api_url)

    async def _run() -> ResumeRecord:
        record = await client.generate_resume(prompt)
        if pdf:
            _write_bytes(pdf, await client.download_pdf(record), "PDF")
        if docx:
            _write_bytes(docx, await client.download_docx(record), "DOCX")
        return record

    try:
        with console.status("Generating resume..."):
            record = asyncio.run(_run())
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    except ApiError as exc:
        console.print(f"[red]API error ({exc.status_code or 'network'}): {exc}[/red]")
        raise typer.Exit(1)

    payload = json.dumps(record.to_payload(), indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        console.print(f"[green]Resume saved: {output}[/green]")
    else:
        console.print_json(payload)


@app.command()
def render(
    resume_json: Path = typer.Argument(help="Saved resume JSON file"),
    pdf: Path = typer.Option(None, "--pdf", help="Write a PDF"),
    docx: Path = typer.Option(None, "--docx", help="Write a Word document"),
    html: Path = typer.Option(None, "--html", help="Write an HTML preview"),
    md: Path = typer.Option(None, "--md", help="Write Markdown"),
) -> None:
    """Export a saved resume record locally, without the server."""
    if not resume_json.exists():
        console.print(f"[red]Resume file not found: {resume_json}[/red]")
        raise typer.Exit(1)
    if not any((pdf, docx, html, md)):
        console.print("[yellow]Nothing to do: pass --pdf, --docx, --html or --md[/yellow]")
        raise typer.Exit(1)

    try:
        data = json.loads(resume_json.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON in {resume_json}: {exc}[/red]")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print("[red]Resume JSON must be an object[/red]")
        raise typer.Exit(1)

    record = ResumeRecord.from_raw(data)
    if pdf:
        _write_bytes(pdf, render_pdf(record), "PDF")
    if docx:
        _write_bytes(docx, render_docx(record), "DOCX")
    if html:
        _write_bytes(html, render_html_preview(record).encode("utf-8"), "HTML")
    if md:
        _write_bytes(md, render_markdown(record).encode("utf-8"), "Markdown")


@app.command()
def health(
    api_url: str = typer.Option(None, "--api-url", help="Base URL of a running server"),
) -> None:
    """Check that a server is reachable and healthy."""
    try:
        status = asyncio.run(_client(api_url).health())
    except ApiError as exc:
        console.print(f"[red]Backend unreachable: {exc}[/red]")
        raise typer.Exit(1)
    console.print(
        Panel(
            "\n".join(f"{key}: {value}" for key, value in status.items()),
            title="Health",
        )
    )


if __name__ == "__main__":
    app()
