"""Strict schema for the model's batch analysis response.

The model is asked for a fixed JSON shape. Anything that does not validate
against these models is rejected as a whole; there is no partial success.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from ..core.types import BatchResult, Insight, Level, Sentiment, SentimentBreakdown, TrendingTopic


class _ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# Counts and text must arrive with their JSON types; only the enum strings
# are coerced into Level and Sentiment.
class InsightPayload(_ResponseModel):
    id: StrictStr | StrictInt | None = None
    topic: StrictStr
    description: StrictStr
    urgency: Level | None = None
    priority: Level | None = None
    frequency: int = Field(default=0, ge=0, strict=True)
    sentiment: Sentiment
    confidence: int = Field(default=0, ge=0, le=100, strict=True)


class TrendingTopicPayload(_ResponseModel):
    topic: StrictStr = Field(min_length=1)
    frequency: int = Field(ge=0, strict=True)
    urgency: Level
    sentiment: Sentiment
    description: StrictStr = ""


class SentimentPayload(_ResponseModel):
    positive: int = Field(ge=0, strict=True)
    negative: int = Field(ge=0, strict=True)
    neutral: int = Field(ge=0, strict=True)


class BatchAnalysisPayload(_ResponseModel):
    insights: list[InsightPayload]
    trending_topics: list[TrendingTopicPayload] = Field(alias="trendingTopics")
    key_findings: list[StrictStr] = Field(alias="keyFindings")
    executive_summary: StrictStr = Field(alias="executiveSummary")
    sentiment_breakdown: SentimentPayload = Field(alias="sentimentBreakdown")


def validate_batch_payload(obj: dict[str, Any]) -> BatchAnalysisPayload:
    """Validate a decoded response object.

    Raises:
        pydantic.ValidationError: If the object does not match the schema
    """
    return BatchAnalysisPayload.model_validate(obj)


def to_batch_result(payload: BatchAnalysisPayload, id_prefix: str, model: str | None = None) -> BatchResult:
    """Convert a validated payload into a BatchResult.

    Insights without an id get ``<id_prefix>-<index>``.
    """
    insights = [
        Insight(
            id=str(item.id) if item.id is not None else f"{id_prefix}-{idx}",
            topic=item.topic,
            description=item.description,
            urgency=item.urgency,
            priority=item.priority,
            frequency=item.frequency,
            sentiment=item.sentiment,
            confidence=item.confidence,
        )
        for idx, item in enumerate(payload.insights)
    ]
    topics = [
        TrendingTopic(
            topic=item.topic,
            frequency=item.frequency,
            urgency=item.urgency,
            sentiment=item.sentiment,
            description=item.description,
        )
        for item in payload.trending_topics
    ]
    breakdown = payload.sentiment_breakdown
    return BatchResult(
        insights=insights,
        trending_topics=topics,
        key_findings=[f for f in payload.key_findings if f.strip()],
        executive_summary=payload.executive_summary,
        sentiment_breakdown=SentimentBreakdown(
            positive=breakdown.positive,
            negative=breakdown.negative,
            neutral=breakdown.neutral,
        ),
        status="ok",
        meta={"model": model} if model else {},
    )
