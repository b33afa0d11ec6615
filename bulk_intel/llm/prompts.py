"""Prompt loading and rendering helpers for LLM providers."""

from __future__ import annotations

from functools import lru_cache
import json
from pathlib import Path
from typing import Any

from ..config import AnalysisConfig
from ..core.fields import UNKNOWN_SENDER, record_body, record_sender, record_title
from ..core.types import AnalysisContext, Batch, Record


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: Any) -> str:
    template = _load_template(name)
    return template.format(**values)


def project_record(record: Record, max_content_chars: int) -> dict[str, Any]:
    """Reduce a record to the fields the model needs."""
    return {
        "id": record.id,
        "title": record_title(record, default="No title"),
        "content": record_body(record)[:max_content_chars],
        "sender": record_sender(record) or UNKNOWN_SENDER,
        "source": record.source.value,
        "agent": record.source_agent,
        "date": record.created_at or "Unknown",
    }


def build_batch_analysis_prompt(batch: Batch, context: AnalysisContext, cfg: AnalysisConfig) -> str:
    projected = [project_record(record, cfg.max_content_chars) for record in batch]
    sources = sorted({record.source.value for record in batch})
    return _render_template(
        "batch_analysis",
        records_json=json.dumps(projected, indent=2, ensure_ascii=False, default=str),
        instance_name=context.instance_name,
        instance_id=context.instance_id,
        period=context.period,
        sources=", ".join(sources) or "none",
        record_count=len(batch),
    )
