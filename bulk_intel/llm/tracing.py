"""
Langfuse tracing helpers for the analysis pipeline.

This module wraps the Langfuse SDK so the pipeline can emit traces/spans
without hard dependencies when tracing is disabled.
"""

from __future__ import annotations

from contextlib import contextmanager
import json
import logging
import os
from typing import Any, Iterator

from ..config import LangfuseConfig
from ..utils.logging import redact_text, truncate_text

logger = logging.getLogger(__name__)

_TRACER = None
_CFG: LangfuseConfig | None = None


def setup_langfuse(cfg: LangfuseConfig) -> None:
    """Initialize Langfuse tracing if enabled and credentials are present."""
    global _TRACER, _CFG  # noqa: PLW0603
    _CFG = cfg
    _TRACER = None
    if not cfg.enabled:
        return

    public_key = _coalesce(cfg.public_key, "LANGFUSE_PUBLIC_KEY")
    secret_key = _coalesce(cfg.secret_key, "LANGFUSE_SECRET_KEY")
    if not public_key or not secret_key:
        logger.warning("Langfuse enabled but keys are missing; tracing disabled")
        return

    try:
        from langfuse import Langfuse  # type: ignore
    except ImportError:
        logger.warning("Langfuse enabled but the langfuse package is not installed; tracing disabled")
        return

    _TRACER = Langfuse(
        public_key=public_key,
        secret_key=secret_key,
        host=_coalesce(cfg.host, "LANGFUSE_HOST"),
        environment=_coalesce(cfg.environment, "LANGFUSE_ENVIRONMENT"),
        release=_coalesce(cfg.release, "LANGFUSE_RELEASE"),
    )


def get_tracer():
    return _TRACER


@contextmanager
def start_span(
    name: str,
    kind: str,
    input_value: Any | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Any | None]:
    """Start a Langfuse span if tracing is enabled."""
    tracer = _TRACER
    if tracer is None:
        yield None
        return

    attrs = _clean_attributes(attributes or {})
    if kind:
        attrs.setdefault("span.kind", kind)

    try:
        cm = tracer.start_as_current_span(
            name=name,
            input=_normalize_text(input_value),
            metadata=attrs,
        )
        span = cm.__enter__()
    except Exception:  # noqa: BLE001
        yield None
        return

    try:
        yield span
    finally:
        try:
            cm.__exit__(None, None, None)
        except Exception:  # noqa: BLE001
            pass


def set_span_output(span: Any | None, output_value: Any) -> None:
    if span is None:
        return
    payload = _normalize_text(output_value)
    if payload is None:
        return
    _safe_update(span, output=payload)


def record_span_error(span: Any | None, exc: Exception) -> None:
    if span is None:
        return
    _safe_update(span, level="ERROR", status_message=str(exc))


def flush() -> None:
    """Flush any pending traces to Langfuse.

    Langfuse uses async ingestion by default. Call this before program
    exit to ensure all traces are sent.
    """
    tracer = _TRACER
    if tracer is None:
        return
    try:
        tracer.flush()
    except Exception:  # noqa: BLE001
        return


def _coalesce(value: str | None, env_key: str) -> str | None:
    if value:
        return value
    return os.getenv(env_key)


def _normalize_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        text = value
    else:
        text = json.dumps(value, ensure_ascii=True, default=str)
    cfg = _CFG
    if cfg is None:
        return text
    text = redact_text(text, cfg.redaction)
    return truncate_text(text, cfg.max_text_chars)


def _clean_attributes(attrs: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in attrs.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


def _safe_update(span: Any, **kwargs: Any) -> None:
    try:
        span.update(**kwargs)
    except Exception:  # noqa: BLE001
        return
