"""LLM access: providers, prompts, response schema and tracing."""

from .parsing import parse_json_response
from .prompts import build_batch_analysis_prompt
from .providers import AnalysisProvider, available_providers, create_provider
from .schema import to_batch_result, validate_batch_payload
from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "AnalysisProvider",
    "available_providers",
    "build_batch_analysis_prompt",
    "create_provider",
    "flush",
    "parse_json_response",
    "record_span_error",
    "set_span_output",
    "setup_langfuse",
    "start_span",
    "to_batch_result",
    "validate_batch_payload",
]
