"""
Core data types for the bulk intelligence pipeline.

This module defines the data structures that flow through the pipeline:
- Record: One communication (email or project update) to analyze
- AnalysisContext: Run-scoped metadata shared by every batch
- Insight / TrendingTopic: Structured findings produced per batch
- BatchResult: The per-batch structured output
- AnalysisReport: The final merged report returned to the caller

``to_dict`` methods emit the camelCase shape consumed by the presentation
layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Source(str, Enum):
    """Where a record came from."""

    EMAIL = "email"
    PROJECT = "project"


class Level(str, Enum):
    """Urgency or priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK = {Level.HIGH: 3, Level.MEDIUM: 2, Level.LOW: 1}


class Sentiment(str, Enum):
    """Overall tone of a topic or insight."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Record:
    """A single communication handed to the pipeline.

    Attributes:
        id: Identifier from the ingestion source
        source: Record kind (email or project update)
        source_agent: Label of the agent that collected the record
        subject: Email subject line
        title: Project update title
        sender: Email sender address or name
        created_by: Project update author
        content: Email body text
        description: Project update description
        created_at: Optional ISO 8601 timestamp
        status: Optional workflow status from the source
    """

    id: str | int
    source: Source
    source_agent: str
    subject: str | None = None
    title: str | None = None
    sender: str | None = None
    created_by: str | None = None
    content: str | None = None
    description: str | None = None
    created_at: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class AnalysisContext:
    """Metadata describing the analysis run."""

    instance_id: int
    instance_name: str
    period: str = "weekly"
    agent_identifier: str = ""


Batch = list[Record]


@dataclass
class Insight:
    """An actionable finding about the analyzed communications.

    ``urgency`` and ``priority`` are ``None`` when the model omitted them;
    ranking treats a missing priority as the lowest possible value.
    """

    id: str
    topic: str
    description: str
    urgency: Level | None
    priority: Level | None
    frequency: int
    sentiment: Sentiment
    confidence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "topic": self.topic,
            "description": self.description,
            "urgency": self.urgency.value if self.urgency else None,
            "priority": self.priority.value if self.priority else None,
            "frequency": self.frequency,
            "sentiment": self.sentiment.value,
            "confidence": self.confidence,
        }


@dataclass
class TrendingTopic:
    """A theme recurring across communications, keyed by ``topic``."""

    topic: str
    frequency: int
    urgency: Level
    sentiment: Sentiment
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "frequency": self.frequency,
            "urgency": self.urgency.value,
            "sentiment": self.sentiment.value,
            "description": self.description,
        }


@dataclass
class SentimentBreakdown:
    """Counts of positive, negative and neutral communications."""

    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    def to_dict(self) -> dict[str, int]:
        return {"positive": self.positive, "negative": self.negative, "neutral": self.neutral}


@dataclass
class BatchResult:
    """Structured analysis of one batch.

    Attributes:
        insights: Insights found in the batch
        trending_topics: Topics found in the batch
        key_findings: Free-form findings
        executive_summary: One-paragraph summary of the batch
        sentiment_breakdown: Sentiment counts for the batch
        status: "ok" when produced by the model, "fallback" when heuristic
        meta: Additional metadata (model, error category)
    """

    insights: list[Insight] = field(default_factory=list)
    trending_topics: list[TrendingTopic] = field(default_factory=list)
    key_findings: list[str] = field(default_factory=list)
    executive_summary: str = ""
    sentiment_breakdown: SentimentBreakdown = field(default_factory=SentimentBreakdown)
    status: str = "ok"
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "insights": [i.to_dict() for i in self.insights],
            "trendingTopics": [t.to_dict() for t in self.trending_topics],
            "keyFindings": list(self.key_findings),
            "executiveSummary": self.executive_summary,
            "sentimentBreakdown": self.sentiment_breakdown.to_dict(),
        }


@dataclass(frozen=True)
class ReportMetrics:
    """Headline numbers for the report."""

    email_volume: int = 0
    participation_rate: int = 0
    sentiment_score: int = 0
    alert_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "emailVolume": self.email_volume,
            "participationRate": self.participation_rate,
            "sentimentScore": self.sentiment_score,
            "alertCount": self.alert_count,
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Final merged report for a pipeline run."""

    insights: list[Insight]
    trending_topics: list[TrendingTopic]
    key_findings: list[str]
    executive_summary: str
    summary_highlights: list[str]
    recommended_action: str
    metrics: ReportMetrics
    source_breakdown: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "insights": [i.to_dict() for i in self.insights],
            "trendingTopics": [t.to_dict() for t in self.trending_topics],
            "keyFindings": list(self.key_findings),
            "executiveSummary": self.executive_summary,
            "summaryHighlights": list(self.summary_highlights),
            "recommendedAction": self.recommended_action,
            "metrics": self.metrics.to_dict(),
            "sourceBreakdown": dict(self.source_breakdown),
        }
