"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: LLM provider settings
- BatchingConfig: How records are split into batches
- AnalysisConfig: Prompt and generation settings for batch analysis
- FallbackConfig: Constants for the heuristic fallback analyzer
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the LLM provider.

    ``model``, ``api_key_env`` and ``base_url`` fall back to the selected
    provider's own defaults when left unset.

    Attributes:
        name: Provider name ("anthropic", "gemini", or "none" for offline mode)
        model: Model identifier
        api_key_env: Environment variable name containing the API key
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides env var)
        trust_env: Whether to respect system proxy settings for API requests
        timeout_seconds: HTTP timeout for a single provider call
        anthropic_version: Value of the anthropic-version header
    """

    name: str = "anthropic"
    model: str | None = None
    api_key_env: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    trust_env: bool = True
    timeout_seconds: float = 60.0
    anthropic_version: str = "2023-06-01"


@dataclass
class BatchingConfig:
    """Configuration for record batching.

    Attributes:
        batch_size: Maximum number of records per batch
        max_batch_tokens: Optional estimated-token budget per batch; enables
            token-aware batching when set
        concurrency: Number of batches analyzed in parallel (1 = sequential)
    """

    batch_size: int = 10
    max_batch_tokens: int | None = None
    concurrency: int = 1


@dataclass
class AnalysisConfig:
    """Configuration for LLM batch analysis.

    Attributes:
        max_output_tokens: Upper bound on the model's response size
        temperature: Sampling temperature; kept low for repeatable output
        max_content_chars: Maximum body characters per record sent to the model
    """

    max_output_tokens: int = 2000
    temperature: float = 0.3
    max_content_chars: int = 2000


@dataclass
class FallbackConfig:
    """Constants for the heuristic fallback analyzer.

    The sentiment ratios are a fixed approximation of the batch size, not a
    measurement of the text.

    Attributes:
        positive_ratio: Share of the batch counted as positive (floored)
        negative_ratio: Share of the batch counted as negative (floored)
        neutral_ratio: Share of the batch counted as neutral (ceiled)
        topic_confidence: Confidence assigned to keyword-derived insights
        generic_confidence: Confidence assigned to the volume-only insight
        max_topics: Number of keyword topics kept per batch
    """

    positive_ratio: float = 0.4
    negative_ratio: float = 0.1
    neutral_ratio: float = 0.5
    topic_confidence: int = 70
    generic_confidence: int = 50
    max_topics: int = 3


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Path of the log file
        llm_log_detail: LLM log detail level ("response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_emails")
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "bulk_intel.jsonl"
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_emails"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        environment: Langfuse environment label (optional)
        release: Langfuse release identifier (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "redact_emails"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    batching: BatchingConfig = field(default_factory=BatchingConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    fallback: FallbackConfig = field(default_factory=FallbackConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS: dict[str, type] = {
    "provider": ProviderConfig,
    "batching": BatchingConfig,
    "analysis": AnalysisConfig,
    "fallback": FallbackConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            unknown = set(value) - set(data[key])
            if unknown:
                raise ValueError(f"Unknown {key} config keys: {', '.join(sorted(unknown))}")
            data[key].update(value)
        else:
            raise ValueError(f"Config section '{key}' must be a mapping")
    cfg = _fromdict(data)
    validate_config(cfg)
    return cfg


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})


def validate_config(cfg: AppConfig) -> None:
    """Reject settings the pipeline cannot run with."""
    if cfg.batching.batch_size < 1:
        raise ValueError("batching.batch_size must be >= 1")
    if cfg.batching.concurrency < 1:
        raise ValueError("batching.concurrency must be >= 1")
    if cfg.batching.max_batch_tokens is not None and cfg.batching.max_batch_tokens < 1:
        raise ValueError("batching.max_batch_tokens must be >= 1 when set")
    if cfg.analysis.max_output_tokens < 1:
        raise ValueError("analysis.max_output_tokens must be >= 1")
    if not 0.0 < cfg.analysis.temperature <= 1.0:
        raise ValueError("analysis.temperature must be in (0, 1]")


def get_api_key(cfg: ProviderConfig, default_env: str | None = None) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    env_name = cfg.api_key_env or default_env
    if not env_name:
        return None
    return os.getenv(env_name)
