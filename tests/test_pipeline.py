"""Integration tests for the batch -> analyze -> aggregate pipeline."""

from __future__ import annotations

import json
import threading

from bulk_intel.analyzers.batch_analyzer import BatchAnalyzer
from bulk_intel.config import BatchingConfig
from bulk_intel.pipeline import IntelligencePipeline

from conftest import make_email, make_project


def _llm_payload(topic: str) -> str:
    return json.dumps(
        {
            "insights": [
                {
                    "topic": topic,
                    "description": f"{topic} needs attention",
                    "urgency": "medium",
                    "priority": "medium",
                    "frequency": 2,
                    "sentiment": "neutral",
                    "confidence": 90,
                }
            ],
            "trendingTopics": [
                {"topic": topic, "frequency": 2, "urgency": "medium", "sentiment": "neutral", "description": "d"}
            ],
            "keyFindings": [f"{topic} is trending"],
            "executiveSummary": f"{topic} summary",
            "sentimentBreakdown": {"positive": 1, "negative": 0, "neutral": 1},
        }
    )


class FlakyProvider:
    """Fails on the first call, succeeds afterwards."""

    name = "flaky"
    model = "flaky-1"

    def __init__(self):
        self.calls = 0
        self._lock = threading.Lock()

    def complete(self, prompt: str, *, max_output_tokens: int, temperature: float) -> str:
        with self._lock:
            self.calls += 1
            first = self.calls == 1
        if first:
            raise RuntimeError("upstream unavailable")
        return _llm_payload("Pricing")


def test_failed_batch_and_successful_batch_both_contribute(context):
    records = [make_email(i, subject=f"Deadline item {i}") for i in range(10)]
    records += [make_email(10, subject="Pricing"), make_email(11, subject="Pricing again")]
    provider = FlakyProvider()
    pipeline = IntelligencePipeline(BatchAnalyzer(provider), BatchingConfig(batch_size=10))

    report = pipeline.run(records, context)

    assert provider.calls == 2
    assert pipeline.stats.batches == 2
    assert pipeline.stats.llm_ok == 1
    assert pipeline.stats.fallback == 1
    topics = {t.topic for t in report.trending_topics}
    assert {"Deadline", "Pricing"} <= topics
    insight_topics = {i.topic for i in report.insights}
    assert {"Deadline Activity", "Pricing"} <= insight_topics
    assert report.metrics.email_volume == 12


def test_empty_input_returns_empty_report(context):
    pipeline = IntelligencePipeline(BatchAnalyzer(None))
    report = pipeline.run([], context)
    assert report.metrics.email_volume == 0
    assert report.key_findings == ["No data available for analysis"]
    assert pipeline.stats.batches == 0


def test_concurrent_run_matches_sequential(context):
    records = [
        make_email(1, subject="Customer deadline"),
        make_project(2, title="Support backlog"),
        make_email(3, subject="Budget meeting", sender="lee@example.com"),
        make_project(4, title="Launch campaign"),
        make_email(5, subject="Support ticket"),
        make_email(6, subject="Feedback on proposal"),
        make_project(7, title="Deadline moved"),
    ]
    sequential = IntelligencePipeline(BatchAnalyzer(None), BatchingConfig(batch_size=2)).run(records, context)
    parallel = IntelligencePipeline(
        BatchAnalyzer(None), BatchingConfig(batch_size=2, concurrency=3)
    ).run(records, context)
    assert parallel == sequential


def test_progress_callback_sees_every_batch(context):
    records = [make_email(i, subject="Hello") for i in range(5)]
    seen: list[tuple[int, int]] = []
    pipeline = IntelligencePipeline(BatchAnalyzer(None), BatchingConfig(batch_size=2))
    pipeline.run(records, context, on_batch_done=lambda idx, total: seen.append((idx, total)))
    assert seen == [(0, 3), (1, 3), (2, 3)]


def test_token_budget_switches_batching_strategy(context):
    records = [make_email(i, subject="x" * 40, sender=None) for i in range(4)]
    pipeline = IntelligencePipeline(BatchAnalyzer(None), BatchingConfig(batch_size=10, max_batch_tokens=20))
    assert [len(b) for b in pipeline.make_batches(records)] == [2, 2]
