"""
Heuristic fallback analysis for a batch of records.

Used whenever the LLM path fails. Produces a BatchResult with the same shape
as the model's output, derived from keyword hits in subjects and bodies.
The output is a pure function of the batch, so analyzing the same batch
twice yields identical results.
"""

from __future__ import annotations

import hashlib
import math
import re

from ..config import FallbackConfig
from ..core.fields import SENDER_FIELDS, first_present, record_body, record_title
from ..core.types import Batch, BatchResult, Insight, Level, Sentiment, SentimentBreakdown, TrendingTopic
from .lexicon import (
    BUSINESS_KEYWORDS,
    GENERIC_DESCRIPTION,
    NEGATIVE_SIGNALS,
    POSITIVE_SIGNALS,
    TEST_MARKER,
    TOPIC_DESCRIPTIONS,
    URGENT_SIGNALS,
    VALUE_SIGNALS,
)

MAX_FINDINGS = 4


class HeuristicAnalyzer:
    """Keyword-driven stand-in for the LLM batch analysis."""

    def __init__(self, cfg: FallbackConfig | None = None) -> None:
        self.cfg = cfg or FallbackConfig()

    def analyze(self, batch: Batch) -> BatchResult:
        fingerprint = batch_fingerprint(batch)
        topics = self._keyword_topics(batch) or self._general_topic(batch)
        return BatchResult(
            insights=self._insights(batch, topics, fingerprint),
            trending_topics=topics,
            key_findings=_findings(batch, topics),
            executive_summary=_summary(batch, topics),
            sentiment_breakdown=self._sentiment(len(batch)),
            status="fallback",
        )

    def _keyword_topics(self, batch: Batch) -> list[TrendingTopic]:
        # Insertion order records first hit.
        hits: dict[str, int] = {}
        for record in batch:
            text = f"{record_title(record)} {record_body(record)}".lower()
            for keyword in BUSINESS_KEYWORDS:
                if keyword in text:
                    hits[keyword] = hits.get(keyword, 0) + 1

        # sorted() is stable: equal counts keep first-hit order.
        ranked = sorted(hits.items(), key=lambda item: item[1], reverse=True)
        return [
            TrendingTopic(
                topic=_capitalize(keyword),
                frequency=count,
                urgency=keyword_urgency(keyword),
                sentiment=keyword_sentiment(keyword),
                description=describe_keyword(keyword, count),
            )
            for keyword, count in ranked[: self.cfg.max_topics]
        ]

    def _general_topic(self, batch: Batch) -> list[TrendingTopic]:
        subjects = [record_title(record, default="Communication") for record in batch]
        subjects = [s for s in subjects if TEST_MARKER not in s.lower()]
        if not subjects:
            return []
        return [
            TrendingTopic(
                topic="General Communications",
                frequency=len(subjects),
                urgency=Level.MEDIUM,
                sentiment=Sentiment.NEUTRAL,
                description=f"Various communication topics including: {', '.join(subjects[:2])}",
            )
        ]

    def _insights(self, batch: Batch, topics: list[TrendingTopic], fingerprint: str) -> list[Insight]:
        if not topics:
            return [
                Insight(
                    id=f"general-{fingerprint}",
                    topic="Communication Activity",
                    description=(
                        f"{len(batch)} communications received - individual review "
                        "recommended for specific business insights"
                    ),
                    urgency=Level.MEDIUM,
                    priority=Level.MEDIUM,
                    frequency=len(batch),
                    sentiment=Sentiment.NEUTRAL,
                    confidence=self.cfg.generic_confidence,
                )
            ]
        return [
            Insight(
                id=f"content-{_slug(topic.topic)}-{fingerprint}",
                topic=f"{topic.topic} Activity",
                description=topic.description,
                urgency=topic.urgency,
                priority=topic.urgency,
                frequency=topic.frequency,
                sentiment=topic.sentiment,
                confidence=self.cfg.topic_confidence,
            )
            for topic in topics
        ]

    def _sentiment(self, size: int) -> SentimentBreakdown:
        # Fixed split of the batch size, not a measurement of the text.
        return SentimentBreakdown(
            positive=math.floor(size * self.cfg.positive_ratio),
            negative=math.floor(size * self.cfg.negative_ratio),
            neutral=math.ceil(size * self.cfg.neutral_ratio),
        )


def keyword_urgency(keyword: str) -> Level:
    if any(signal in keyword for signal in URGENT_SIGNALS):
        return Level.HIGH
    if any(signal in keyword for signal in VALUE_SIGNALS):
        return Level.MEDIUM
    return Level.LOW


def keyword_sentiment(keyword: str) -> Sentiment:
    if any(signal in keyword for signal in POSITIVE_SIGNALS):
        return Sentiment.POSITIVE
    if any(signal in keyword for signal in NEGATIVE_SIGNALS):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def describe_keyword(keyword: str, count: int) -> str:
    template = TOPIC_DESCRIPTIONS.get(keyword, GENERIC_DESCRIPTION)
    return template.format(count=count, keyword=keyword)


def batch_fingerprint(batch: Batch) -> str:
    """Short stable hash of the record ids in a batch."""
    joined = ",".join(str(record.id) for record in batch)
    return hashlib.md5(joined.encode("utf-8")).hexdigest()[:8]


def _findings(batch: Batch, topics: list[TrendingTopic]) -> list[str]:
    findings: list[str] = []
    if topics:
        findings.append(f"Active discussions around: {', '.join(t.topic for t in topics)}")
        urgent = [t.topic for t in topics if t.urgency == Level.HIGH]
        if urgent:
            findings.append(f"High priority areas: {', '.join(urgent)}")

    findings.append(f"{len(batch)} communications analyzed for business intelligence")

    senders = {first_present(record, SENDER_FIELDS) for record in batch} - {None}
    if len(senders) > 1:
        findings.append(f"{len(senders)} participants contributing to discussions")

    return findings[:MAX_FINDINGS]


def _summary(batch: Batch, topics: list[TrendingTopic]) -> str:
    if topics:
        top = topics[0]
        return (
            f"Primary focus area: {top.topic} with {top.frequency} related communications. "
            f"{top.description}"
        )
    return (
        f"{len(batch)} communications received across various topics. Individual review "
        "recommended for specific business opportunities and action items."
    )


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "topic"
