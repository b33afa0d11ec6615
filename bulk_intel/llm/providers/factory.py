"""Provider factory and registry for hot-swappable LLM backends."""

from __future__ import annotations

from ...config import ProviderConfig, get_api_key
from .anthropic import AnthropicProvider
from .base import AnalysisProvider
from .gemini import GeminiProvider


ProviderBuilder = type[AnalysisProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "anthropic": AnthropicProvider,
    "claude": AnthropicProvider,
    "gemini": GeminiProvider,
}


class UnsupportedProviderError(ValueError):
    """Raised for a provider name that is neither registered nor offline."""


# Names that select heuristic-only analysis.
OFFLINE_PROVIDERS = frozenset({"none", "offline"})


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(set(_PROVIDER_REGISTRY) | OFFLINE_PROVIDERS)


def create_provider(provider_cfg: ProviderConfig) -> AnalysisProvider | None:
    """Build a provider instance from runtime config.

    Returns None for the offline provider names.

    Raises:
        UnsupportedProviderError: If the provider name is unknown
        MissingApiKeyError: If the provider needs an API key and none is set
    """
    name = provider_cfg.name.lower().strip()
    if name in OFFLINE_PROVIDERS:
        return None
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise UnsupportedProviderError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    api_key = get_api_key(provider_cfg, default_env=builder.default_api_key_env)
    return builder(provider_cfg, api_key)
