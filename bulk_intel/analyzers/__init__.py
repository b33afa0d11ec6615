"""Batch analysis: LLM path, heuristic fallback and aggregation."""

from .aggregator import aggregate, empty_report
from .batch_analyzer import BatchAnalyzer
from .heuristic import HeuristicAnalyzer

__all__ = ["BatchAnalyzer", "HeuristicAnalyzer", "aggregate", "empty_report"]
