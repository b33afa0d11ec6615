"""
Aggregation of per-batch results into the final report.

The aggregator flattens every batch's output in batch order, merges topics
that share a name, ranks insights by priority and frequency, and derives the
narrative fields (executive summary, highlights, recommended action, key
findings) from the ranked material. Volume, participation and source metrics
are computed from the original records rather than from batch output, so
they stay accurate even when every batch fell back to heuristics.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
import logging
import math

from ..core.fields import record_sender
from ..core.types import (
    AnalysisContext,
    AnalysisReport,
    BatchResult,
    Insight,
    Level,
    Record,
    ReportMetrics,
    SentimentBreakdown,
    TrendingTopic,
)
from ..utils.logging import log_event

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 10
MAX_TOPICS = 5
MAX_KEY_FINDINGS = 6
SUMMARY_TOPICS = 3
SUMMARY_INSIGHTS = 2
RAW_FINDINGS = 3

EMPTY_FINDING = "No data available for analysis"
EMPTY_SUMMARY = "No data available for intelligence analysis"
EMPTY_ACTION = "No immediate actions available."
DEFAULT_SUMMARY = "Communications are active but require further review for specifics."
DEFAULT_ACTION = "Review recent communications for actionable follow-ups."

_TERMINAL_PUNCTUATION = (".", "!", "?")


def aggregate(
    batch_results: list[BatchResult],
    records: list[Record],
    context: AnalysisContext | None = None,
) -> AnalysisReport:
    """Combine batch results into one AnalysisReport.

    Args:
        batch_results: One result per batch, in batch order
        records: The original, unbatched records
        context: Run metadata (used for logging only)

    Returns:
        The merged report; the canonical empty report when ``records`` is empty
    """
    if not records:
        return empty_report()

    log_event(
        logger,
        "Combining batch results",
        event="aggregate_start",
        batches=len(batch_results),
        records=len(records),
        instance_id=context.instance_id if context else None,
    )

    all_insights = [insight for result in batch_results for insight in result.insights]
    all_topics = [topic for result in batch_results for topic in result.trending_topics]
    all_findings = [finding for result in batch_results for finding in result.key_findings]

    source_breakdown = compute_source_breakdown(records)
    sentiment = sum_sentiment(batch_results)
    topics = dedupe_topics(all_topics)
    ranked = rank_insights(all_insights)
    top_topics = topics[:SUMMARY_TOPICS]

    candidates = [s for s in (ensure_sentence(i.description or i.topic) for i in ranked) if s]
    candidates = candidates[:SUMMARY_INSIGHTS]
    if top_topics:
        topic_statement = ensure_sentence(f"Frequent themes: {format_list([t.topic for t in top_topics])}")
        if topic_statement:
            candidates.append(topic_statement)
    contributor_statement = _contributor_statement(records)
    if contributor_statement:
        candidates.append(contributor_statement)
    if not candidates:
        fallback = ensure_sentence(
            f"Communications include {len(records)} updates across {len(source_breakdown)} channels"
        )
        if fallback:
            candidates.append(fallback)

    executive_summary = candidates[0] if candidates else DEFAULT_SUMMARY
    summary_highlights = candidates[1:]

    return AnalysisReport(
        insights=ranked[:MAX_INSIGHTS],
        trending_topics=topics[:MAX_TOPICS],
        key_findings=_key_findings(executive_summary, summary_highlights, top_topics, all_findings),
        executive_summary=executive_summary,
        summary_highlights=summary_highlights,
        recommended_action=_recommended_action(ranked, top_topics),
        metrics=ReportMetrics(
            email_volume=len(records),
            participation_rate=count_participants(records),
            sentiment_score=sentiment_score(sentiment),
            alert_count=sum(1 for insight in ranked if insight.urgency == Level.HIGH),
        ),
        source_breakdown=source_breakdown,
    )


def empty_report() -> AnalysisReport:
    return AnalysisReport(
        insights=[],
        trending_topics=[],
        key_findings=[EMPTY_FINDING],
        executive_summary=EMPTY_SUMMARY,
        summary_highlights=[],
        recommended_action=EMPTY_ACTION,
        metrics=ReportMetrics(),
        source_breakdown={},
    )


def dedupe_topics(topics: list[TrendingTopic]) -> list[TrendingTopic]:
    """Merge topics with identical names, summing frequency.

    The first occurrence supplies urgency, sentiment and description. The
    result is sorted by merged frequency, descending; equal frequencies keep
    first-seen order. Input topics are not modified.
    """
    merged: dict[str, TrendingTopic] = {}
    for topic in topics:
        existing = merged.get(topic.topic)
        if existing is None:
            merged[topic.topic] = replace(topic)
        else:
            existing.frequency += topic.frequency
    return sorted(merged.values(), key=lambda t: t.frequency, reverse=True)


def priority_score(insight: Insight) -> int:
    return insight.priority.rank if insight.priority else 0


def rank_insights(insights: list[Insight]) -> list[Insight]:
    """Order by priority rank then frequency, both descending.

    Python's sort is stable under ``reverse=True``, so exact ties keep batch
    order.
    """
    return sorted(insights, key=lambda i: (priority_score(i), i.frequency or 0), reverse=True)


def compute_source_breakdown(records: list[Record]) -> dict[str, int]:
    breakdown: dict[str, int] = {}
    for record in records:
        key = f"{record.source_agent}_{record.source.value}"
        breakdown[key] = breakdown.get(key, 0) + 1
    return breakdown


def count_participants(records: list[Record]) -> int:
    senders = {(record_sender(record) or "").strip() for record in records}
    senders.discard("")
    return len(senders)


def sum_sentiment(batch_results: list[BatchResult]) -> SentimentBreakdown:
    total = SentimentBreakdown()
    for result in batch_results:
        breakdown = result.sentiment_breakdown
        total.positive += breakdown.positive
        total.negative += breakdown.negative
        total.neutral += breakdown.neutral
    return total


def sentiment_score(counts: SentimentBreakdown) -> int:
    """Map sentiment counts to 0-100, where 50 is balanced or no data."""
    total = counts.total
    if total <= 0:
        return 50
    raw = ((counts.positive - counts.negative) / total) * 50 + 50
    # Half-up rounding, so 62.5 scores 63 rather than banker's 62.
    return max(0, min(100, math.floor(raw + 0.5)))


def ensure_sentence(text: str | None) -> str | None:
    """Trim ``text`` and end it with terminal punctuation; None if blank."""
    if not text:
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    if trimmed.endswith(_TERMINAL_PUNCTUATION):
        return trimmed
    return f"{trimmed}."


def format_list(items: list[str]) -> str:
    """Join items as "A", "A and B", or "A, B, and C"."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def _contributor_statement(records: list[Record]) -> str | None:
    counts: Counter[str] = Counter()
    for record in records:
        sender = (record_sender(record) or "").strip()
        if sender:
            counts[sender] += 1
    if not counts:
        return None
    # most_common keeps insertion order among equal counts.
    sender, count = counts.most_common(1)[0]
    plural = "" if count == 1 else "s"
    return ensure_sentence(f"{sender} shared {count} update{plural}")


def _recommended_action(ranked: list[Insight], top_topics: list[TrendingTopic]) -> str:
    chosen = next((i for i in ranked if i.priority == Level.HIGH), ranked[0] if ranked else None)
    raw: str | None = None
    if chosen is not None:
        raw = f"Prioritize {chosen.topic or 'the highlighted work'}: {chosen.description or chosen.topic}"
    elif top_topics:
        raw = f"Coordinate next steps on {top_topics[0].topic} to keep momentum"
    return ensure_sentence(raw) or DEFAULT_ACTION


def _key_findings(
    executive_summary: str,
    highlights: list[str],
    top_topics: list[TrendingTopic],
    raw_findings: list[str],
) -> list[str]:
    # dict keys act as an insertion-ordered set.
    findings: dict[str, None] = dict.fromkeys([executive_summary, *highlights])
    for topic in top_topics:
        line = ensure_sentence(f"{topic.topic}: {topic.description}")
        if line:
            findings.setdefault(line, None)
    for finding in raw_findings[:RAW_FINDINGS]:
        findings.setdefault(ensure_sentence(finding) or finding, None)
    return list(findings)[:MAX_KEY_FINDINGS]
