"""Abstract interface for text-analysis providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...config import ProviderConfig


class MissingApiKeyError(ValueError):
    """Raised when a provider is selected but no API key is configured."""


class AnalysisProvider(ABC):
    """Provider interface for a single prompt-in, text-out model call.

    Implementations raise ``httpx.HTTPError`` on transport failures and
    non-success responses. Interpreting the returned text is the caller's job.
    """

    name: str = "base"
    default_model: str = ""
    default_base_url: str = ""
    default_api_key_env: str = ""

    def __init__(self, cfg: ProviderConfig, api_key: str | None):
        if not api_key:
            env_name = cfg.api_key_env or self.default_api_key_env
            raise MissingApiKeyError(f"Missing {self.name} API key (set {env_name})")
        self.cfg = cfg
        self.api_key = api_key
        self.model = cfg.model or self.default_model
        self.base_url = (cfg.base_url or self.default_base_url).rstrip("/")

    @abstractmethod
    def complete(self, prompt: str, *, max_output_tokens: int, temperature: float) -> str:
        """Send ``prompt`` and return the model's raw text response."""
        raise NotImplementedError
