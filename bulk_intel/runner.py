"""
Entry point wiring configuration, logging, tracing and the pipeline.

``run_analysis`` is what the CLI calls: it loads an export file, builds the
provider (falling back to offline mode when no API key is available), runs
the pipeline with an optional progress bar and returns the report.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .analyzers.batch_analyzer import BatchAnalyzer
from .analyzers.heuristic import HeuristicAnalyzer
from .config import AppConfig
from .core.types import AnalysisContext, AnalysisReport, Record
from .input.json_parser import parse_records_json
from .llm.providers import AnalysisProvider, MissingApiKeyError, create_provider
from .llm.tracing import setup_langfuse
from .pipeline import IntelligencePipeline, PipelineStats
from .utils.logging import LOGGER_NAME, log_event, setup_logging


def build_provider(cfg: AppConfig, logger: logging.Logger) -> AnalysisProvider | None:
    """Create the configured provider, or None for heuristic-only runs.

    An unknown provider name is a configuration error and raises. A missing
    API key only downgrades the run to offline mode.
    """
    try:
        return create_provider(cfg.provider)
    except MissingApiKeyError as exc:
        log_event(
            logger,
            "Provider unavailable, running heuristic analysis only",
            level=logging.WARNING,
            event="provider_unavailable",
            provider=cfg.provider.name,
            error=str(exc),
        )
        return None


def build_pipeline(
    cfg: AppConfig,
    provider: AnalysisProvider | None,
    logger: logging.Logger | None = None,
) -> IntelligencePipeline:
    """Assemble a pipeline from config and an already-built provider."""
    logger = logger or logging.getLogger(LOGGER_NAME)
    analyzer = BatchAnalyzer(
        provider,
        cfg.analysis,
        fallback=HeuristicAnalyzer(cfg.fallback),
        log_cfg=cfg.logging,
        logger=logger.getChild("batch"),
    )
    return IntelligencePipeline(analyzer, cfg.batching, logger)


def load_records(input_path: Path) -> tuple[list[Record], AnalysisContext]:
    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Invalid JSON format: top-level value must be an object")
    return parse_records_json(data)


def run_analysis(
    input_path: Path,
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
) -> tuple[AnalysisReport, PipelineStats]:
    """Analyze an export file and return the report with run statistics.

    Args:
        input_path: Path to the JSON export
        cfg: Application configuration
        show_progress: Whether to display a progress bar
        console: Rich console for progress output (creates default if None)

    Returns:
        Tuple of (report, stats)
    """
    logger = setup_logging(cfg.logging)
    setup_langfuse(cfg.langfuse)

    records, context = load_records(input_path)
    log_event(logger, "Loaded records", event="records_loaded", input=str(input_path), count=len(records))

    provider = build_provider(cfg, logger)
    pipeline = build_pipeline(cfg, provider, logger)

    if not show_progress or not records:
        report = pipeline.run(records, context)
        return report, pipeline.stats

    console = console or Console(stderr=True)
    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    )
    with progress:
        task = progress.add_task("Analyzing batches", total=None)

        def _on_batch_done(_idx: int, total: int) -> None:
            progress.update(task, total=total, advance=1)

        report = pipeline.run(records, context, on_batch_done=_on_batch_done)
    return report, pipeline.stats
