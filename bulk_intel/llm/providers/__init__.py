"""LLM provider implementations for batch analysis."""

from .anthropic import AnthropicProvider
from .base import AnalysisProvider, MissingApiKeyError
from .factory import OFFLINE_PROVIDERS, UnsupportedProviderError, available_providers, create_provider
from .gemini import GeminiProvider

__all__ = [
    "AnalysisProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "MissingApiKeyError",
    "OFFLINE_PROVIDERS",
    "UnsupportedProviderError",
    "create_provider",
    "available_providers",
]
