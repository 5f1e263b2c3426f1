"""Model provider clients."""

from chainbench.providers.anthropic import AnthropicProvider
from chainbench.providers.base import Provider
from chainbench.providers.errors import NoCredentialsError, ProviderError
from chainbench.providers.gemini import GeminiProvider
from chainbench.providers.openai import OpenAIProvider
from chainbench.providers.registry import ProviderRegistry
from chainbench.providers.retry import get_delay, send_with_retry


__all__ = [
    "AnthropicProvider",
    "GeminiProvider",
    "NoCredentialsError",
    "OpenAIProvider",
    "Provider",
    "ProviderError",
    "ProviderRegistry",
    "get_delay",
    "send_with_retry",
]
