"""
Record batching for LLM analysis.

Two strategies are available:
1. Fixed-size chunks (the default): every batch holds ``batch_size`` records
   except possibly the last.
2. Token-budget chunks: batches close early when the estimated prompt cost
   of their records would exceed a token budget.

Both preserve input order and place every record in exactly one batch.
"""

from __future__ import annotations

import math

from .fields import record_body, record_sender, record_title
from .types import Batch, Record

# Rough average for English business text.
CHARS_PER_TOKEN = 4


def create_batches(records: list[Record], batch_size: int = 10) -> list[Batch]:
    """Split records into ordered, non-overlapping chunks.

    Args:
        records: Records in caller order
        batch_size: Maximum records per batch (must be >= 1)

    Returns:
        List of batches; empty when ``records`` is empty

    Raises:
        ValueError: If batch_size is less than 1
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    return [records[i : i + batch_size] for i in range(0, len(records), batch_size)]


def estimate_tokens(record: Record) -> int:
    """Approximate the prompt tokens a record will consume."""
    text = record_title(record) + record_body(record) + (record_sender(record, default="") or "")
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def create_token_batches(
    records: list[Record],
    max_tokens: int,
    max_items: int = 10,
) -> list[Batch]:
    """Split records so each batch stays under an estimated token budget.

    A record whose own estimate exceeds ``max_tokens`` still forms a batch on
    its own; it is never dropped.

    Args:
        records: Records in caller order
        max_tokens: Estimated token budget per batch
        max_items: Maximum records per batch

    Returns:
        List of batches in input order
    """
    if max_tokens < 1 or max_items < 1:
        raise ValueError("max_tokens and max_items must be >= 1")

    batches: list[Batch] = []
    current: Batch = []
    current_tokens = 0
    for record in records:
        tokens = estimate_tokens(record)
        if current and (len(current) >= max_items or current_tokens + tokens > max_tokens):
            batches.append(current)
            current = []
            current_tokens = 0
        current.append(record)
        current_tokens += tokens

    if current:
        batches.append(current)
    return batches
