"""Tests for structured logging helpers and Langfuse setup."""

from __future__ import annotations

import json
import sys
import types

from bulk_intel.config import LangfuseConfig, LoggingConfig
from bulk_intel.llm import tracing
from bulk_intel.utils.logging import log_event, redact_text, setup_logging, truncate_text


def test_redact_text_modes():
    text = "Reply to ana.maria+x@example.co.uk today"
    assert redact_text(text, "none") == text
    assert redact_text(text, "redact_content") == ""
    assert redact_text(text, "redact_emails") == "Reply to [REDACTED_EMAIL] today"


def test_truncate_text():
    assert truncate_text("abc", 5) == "abc"
    assert truncate_text("abcdef", 3) == "abc...(truncated)"


def test_jsonl_file_logging_includes_event_fields(tmp_path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, log_dir=tmp_path)
    log_event(logger, "Batch complete", event="batch_complete", batch=1, status="ok")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    payload = json.loads(lines[-1])
    assert payload["message"] == "Batch complete"
    assert payload["event"] == "batch_complete"
    assert payload["batch"] == 1
    assert payload["level"] == "INFO"
    for handler in logger.handlers:
        handler.close()


def test_log_event_ignores_missing_logger():
    log_event(None, "nothing", event="noop")


def test_setup_langfuse_passes_credentials(monkeypatch):
    captured: dict = {}

    class DummyLangfuse:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    monkeypatch.setitem(sys.modules, "langfuse", types.SimpleNamespace(Langfuse=DummyLangfuse))
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-test")
    monkeypatch.setenv("LANGFUSE_HOST", "https://langfuse.example.com")

    tracing.setup_langfuse(LangfuseConfig(enabled=True, environment="test"))

    assert captured["public_key"] == "pk-test"
    assert captured["secret_key"] == "sk-test"
    assert captured["host"] == "https://langfuse.example.com"
    assert captured["environment"] == "test"
    assert tracing.get_tracer() is not None


def test_setup_langfuse_disables_tracer_when_keys_missing(monkeypatch):
    monkeypatch.delenv("LANGFUSE_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("LANGFUSE_SECRET_KEY", raising=False)

    tracing.setup_langfuse(LangfuseConfig(enabled=True))

    assert tracing.get_tracer() is None


def test_start_span_records_output_and_errors(monkeypatch):
    updates: list[dict] = []

    class DummySpan:
        def update(self, **kwargs):
            updates.append(kwargs)

    class DummyContext:
        def __enter__(self):
            return DummySpan()

        def __exit__(self, *exc):
            return False

    class DummyTracer:
        def start_as_current_span(self, **kwargs):
            updates.append({"started": kwargs["name"], "metadata": kwargs["metadata"]})
            return DummyContext()

    monkeypatch.setattr(tracing, "_TRACER", DummyTracer())
    monkeypatch.setattr(tracing, "_CFG", LangfuseConfig(enabled=True))

    with tracing.start_span("bulk_intel.analyze_batch", kind="llm", attributes={"batch.size": 3, "skip": None}) as span:
        tracing.set_span_output(span, "mail ana@example.com")
        tracing.record_span_error(span, ValueError("bad"))

    assert updates[0] == {
        "started": "bulk_intel.analyze_batch",
        "metadata": {"batch.size": 3, "span.kind": "llm"},
    }
    assert updates[1] == {"output": "mail [REDACTED_EMAIL]"}
    assert updates[2] == {"level": "ERROR", "status_message": "bad"}


def test_start_span_is_noop_without_tracer():
    with tracing.start_span("x", kind="chain") as span:
        assert span is None
    tracing.flush()
