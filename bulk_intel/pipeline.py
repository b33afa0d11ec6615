"""
Pipeline orchestration for bulk communication analysis.

This module coordinates the workflow:
1. Split records into batches
2. Analyze each batch (LLM, or heuristic fallback)
3. Aggregate all batch results into one report

Batches run one at a time by default so a single provider sees at most one
request in flight. With ``batching.concurrency > 1`` batches run in a thread
pool and results are put back in batch order before aggregation, because
insight ranking breaks ties by encounter order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from contextvars import copy_context
from dataclasses import dataclass
import logging
from typing import Callable

from .analyzers.aggregator import aggregate, empty_report
from .analyzers.batch_analyzer import BatchAnalyzer
from .config import BatchingConfig
from .core.batcher import create_batches, create_token_batches
from .core.types import AnalysisContext, AnalysisReport, Batch, BatchResult, Record
from .llm.tracing import set_span_output, start_span
from .utils.logging import log_event


@dataclass
class PipelineStats:
    """Counts collected during a pipeline run.

    Attributes:
        records: Number of input records
        batches: Number of batches analyzed
        llm_ok: Batches analyzed by the provider
        fallback: Batches analyzed by the heuristic fallback
    """

    records: int = 0
    batches: int = 0
    llm_ok: int = 0
    fallback: int = 0


ProgressCallback = Callable[[int, int], None]


class IntelligencePipeline:
    """Batch, analyze and aggregate a list of records."""

    def __init__(
        self,
        analyzer: BatchAnalyzer,
        cfg: BatchingConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.cfg = cfg or BatchingConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.stats = PipelineStats()

    def run(
        self,
        records: list[Record],
        context: AnalysisContext,
        on_batch_done: ProgressCallback | None = None,
    ) -> AnalysisReport:
        self.stats = PipelineStats(records=len(records))
        if not records:
            log_event(self.logger, "No records to analyze", event="pipeline_empty")
            return empty_report()

        batches = self.make_batches(records)
        self.stats.batches = len(batches)

        with start_span(
            "bulk_intel.run",
            kind="chain",
            input_value={"records": len(records), "batches": len(batches)},
            attributes={"instance_id": context.instance_id, "period": context.period},
        ) as run_span:
            log_event(
                self.logger,
                "Pipeline start",
                event="pipeline_start",
                records=len(records),
                batches=len(batches),
                instance_id=context.instance_id,
                period=context.period,
            )
            results = self._analyze_batches(batches, context, on_batch_done)
            report = aggregate(results, records, context)

            log_event(
                self.logger,
                "Pipeline complete",
                event="pipeline_complete",
                batches=self.stats.batches,
                llm_ok=self.stats.llm_ok,
                fallback=self.stats.fallback,
                insights=len(report.insights),
                topics=len(report.trending_topics),
            )
            set_span_output(
                run_span,
                {"llm_ok": self.stats.llm_ok, "fallback": self.stats.fallback},
            )
        return report

    def make_batches(self, records: list[Record]) -> list[Batch]:
        if self.cfg.max_batch_tokens:
            return create_token_batches(records, self.cfg.max_batch_tokens, self.cfg.batch_size)
        return create_batches(records, self.cfg.batch_size)

    def _analyze_batches(
        self,
        batches: list[Batch],
        context: AnalysisContext,
        on_batch_done: ProgressCallback | None,
    ) -> list[BatchResult]:
        total = len(batches)
        concurrency = max(1, int(self.cfg.concurrency))

        def _done(idx: int, result: BatchResult) -> None:
            if result.status == "ok":
                self.stats.llm_ok += 1
            else:
                self.stats.fallback += 1
            log_event(
                self.logger,
                "Batch complete",
                event="batch_complete",
                batch=idx + 1,
                total=total,
                status=result.status,
                reason=result.meta.get("reason"),
            )
            if on_batch_done is not None:
                on_batch_done(idx, total)

        if concurrency == 1:
            results: list[BatchResult] = []
            for idx, batch in enumerate(batches):
                log_event(
                    self.logger,
                    "Batch start",
                    event="batch_start",
                    batch=idx + 1,
                    total=total,
                    size=len(batch),
                )
                result = self.analyzer.analyze(batch, context)
                results.append(result)
                _done(idx, result)
            return results

        log_event(self.logger, "Batch concurrency enabled", event="batch_concurrency_enabled", workers=concurrency)
        slots: list[BatchResult | None] = [None] * total
        with ThreadPoolExecutor(max_workers=concurrency) as executor:
            future_map = {}
            for idx, batch in enumerate(batches):
                # Copy current context (including tracing ids) into worker thread.
                ctx = copy_context()
                future = executor.submit(ctx.run, self.analyzer.analyze, batch, context)
                future_map[future] = idx

            for future in as_completed(future_map):
                idx = future_map[future]
                slots[idx] = future.result()
                _done(idx, slots[idx])

        if any(r is None for r in slots):
            raise RuntimeError("Batch results incomplete")
        return [r for r in slots if r is not None]
