"""Batch analyzer: one LLM call per batch, heuristic fallback on failure."""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from ..config import AnalysisConfig, LoggingConfig
from ..core.types import AnalysisContext, Batch, BatchResult
from ..llm.parsing import parse_json_response
from ..llm.prompts import build_batch_analysis_prompt
from ..llm.providers.base import AnalysisProvider
from ..llm.schema import to_batch_result, validate_batch_payload
from ..llm.tracing import record_span_error, set_span_output, start_span
from ..utils.logging import log_event, redact_text, truncate_text
from .heuristic import HeuristicAnalyzer, batch_fingerprint


class BatchAnalyzer:
    """Analyze one batch with the configured provider.

    Never raises for provider or response problems: transport errors,
    unparseable text and schema violations all fall back to the heuristic
    analyzer. A ``None`` provider means offline mode.
    """

    def __init__(
        self,
        provider: AnalysisProvider | None,
        cfg: AnalysisConfig | None = None,
        fallback: HeuristicAnalyzer | None = None,
        log_cfg: LoggingConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.cfg = cfg or AnalysisConfig()
        self.fallback = fallback or HeuristicAnalyzer()
        self.log_cfg = log_cfg or LoggingConfig()
        self.logger = logger or logging.getLogger(__name__)

    def analyze(self, batch: Batch, context: AnalysisContext) -> BatchResult:
        if self.provider is None:
            return self._fallback(batch, "offline")

        prompt = build_batch_analysis_prompt(batch, context, self.cfg)
        content = ""
        with start_span(
            "bulk_intel.analyze_batch",
            kind="llm",
            input_value=prompt,
            attributes={
                "llm.model": self.provider.model,
                "llm.provider": self.provider.name,
                "batch.size": len(batch),
                "context.instance_id": context.instance_id,
            },
        ) as span:
            try:
                content = self.provider.complete(
                    prompt,
                    max_output_tokens=self.cfg.max_output_tokens,
                    temperature=self.cfg.temperature,
                )
                set_span_output(span, content)
                payload = validate_batch_payload(parse_json_response(content))
            except httpx.HTTPError as exc:
                record_span_error(span, exc)
                self._log_llm_response("provider_error", str(exc), prompt)
                return self._fallback(batch, "provider_error", exc)
            except json.JSONDecodeError as exc:
                record_span_error(span, exc)
                self._log_llm_response("parse_error", content, prompt)
                return self._fallback(batch, "parse_error", exc)
            except ValidationError as exc:
                record_span_error(span, exc)
                self._log_llm_response("validation_error", content, prompt)
                return self._fallback(batch, "validation_error", exc)
            except Exception as exc:  # noqa: BLE001
                record_span_error(span, exc)
                self._log_llm_response("provider_error", str(exc), prompt)
                return self._fallback(batch, "provider_error", exc)

        self._log_llm_response("ok", content, prompt)
        return to_batch_result(payload, id_prefix=f"llm-{batch_fingerprint(batch)}", model=self.provider.model)

    def _fallback(self, batch: Batch, reason: str, exc: Exception | None = None) -> BatchResult:
        if exc is not None:
            log_event(
                self.logger,
                "Batch analysis failed, using heuristic fallback",
                level=logging.WARNING,
                event="batch_fallback",
                reason=reason,
                error=f"{type(exc).__name__}: {exc}",
                batch_size=len(batch),
            )
        result = self.fallback.analyze(batch)
        result.meta["reason"] = reason
        return result

    def _log_llm_response(self, status: str, content: str, prompt: str) -> None:
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": "llm_batch_response",
            "status": status,
            "model": self.provider.model if self.provider else None,
            "raw_response": truncate_text(redact_text(content, redaction)),
        }
        if self.log_cfg.llm_log_detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        log_event(self.logger, "LLM response", level=logging.DEBUG, **payload)
