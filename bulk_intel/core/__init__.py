"""Core data types and batching."""

from .batcher import create_batches, create_token_batches, estimate_tokens
from .types import (
    AnalysisContext,
    AnalysisReport,
    Batch,
    BatchResult,
    Insight,
    Level,
    Record,
    ReportMetrics,
    Sentiment,
    SentimentBreakdown,
    Source,
    TrendingTopic,
)

__all__ = [
    "AnalysisContext",
    "AnalysisReport",
    "Batch",
    "BatchResult",
    "Insight",
    "Level",
    "Record",
    "ReportMetrics",
    "Sentiment",
    "SentimentBreakdown",
    "Source",
    "TrendingTopic",
    "create_batches",
    "create_token_batches",
    "estimate_tokens",
]
