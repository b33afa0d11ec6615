"""
Command-line interface for bulk communication analysis.

Uses Typer to provide a CLI with options for the most common configuration
settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import load_config, validate_config
from .llm.tracing import flush
from .renderer import render_report
from .runner import run_analysis

app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main() -> None:
    """Bulk communication intelligence."""


@app.command()
def analyze(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True, dir_okay=False),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json."),
    batch_size: int | None = typer.Option(None, "--batch-size", help="Records per batch."),
    concurrency: int | None = typer.Option(None, "--concurrency", help="Batches analyzed in parallel."),
    provider: str | None = typer.Option(None, "--provider", help="Provider name: anthropic, gemini, none."),
    model: str | None = typer.Option(None, "--model", help="Override provider model."),
    offline: bool = typer.Option(False, "--offline", help="Skip the LLM and use heuristic analysis only."),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override provider API key (or use .env)."),
):
    """Analyze an export of emails and project updates.

    Reads a JSON export, analyzes it in batches and prints the merged report.

    Args:
        input: Path to the JSON export
        config: Optional path to YAML config file
        output_format: "text" for a rendered report, "json" for raw JSON
        batch_size: Override records per batch
        concurrency: Override number of parallel batch calls
        provider: Override provider name
        model: Override provider model
        offline: Force heuristic-only analysis
        progress: Whether to show a progress bar
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        api_key: Override LLM provider API key
    """
    load_dotenv()

    if output_format not in {"text", "json"}:
        err_console.print(f"[red]Unsupported format: {output_format}[/red]")
        raise typer.Exit(code=2)

    try:
        cfg = load_config(str(config) if config else None)
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Invalid config:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    # Override with CLI options
    if api_key:
        cfg.provider.api_key = api_key
    if provider:
        cfg.provider.name = provider
    if model:
        cfg.provider.model = model
    if offline:
        cfg.provider.name = "none"
    if batch_size is not None:
        cfg.batching.batch_size = batch_size
    if concurrency is not None:
        cfg.batching.concurrency = concurrency
    if log_level:
        cfg.logging.level = log_level
    if output_format == "json":
        # Keep stdout clean for the JSON document.
        progress = False

    try:
        validate_config(cfg)
        report, stats = run_analysis(input, cfg, show_progress=progress, console=err_console)
    except ValueError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        flush()

    if output_format == "json":
        typer.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return

    render_report(report, console)
    console.print(
        f"[dim]records={stats.records} batches={stats.batches} "
        f"llm_ok={stats.llm_ok} fallback={stats.fallback}[/dim]"
    )


if __name__ == "__main__":
    app()
