"""Provider construction and caching."""

import threading

import structlog

from chainbench.providers.anthropic import AnthropicProvider
from chainbench.providers.base import Provider
from chainbench.providers.errors import NoCredentialsError
from chainbench.providers.gemini import GeminiProvider
from chainbench.providers.openai import OpenAIProvider
from chainbench.settings.app import AppSettings


logger = structlog.get_logger()

_PROVIDER_CLASSES: dict[str, type] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "google": GeminiProvider,
}


class ProviderRegistry:
    """Creates one provider per name on first use and reuses it."""

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings
        self._providers: dict[str, Provider] = {}
        self._lock = threading.Lock()
        self._log = logger.bind(component="providers", subcomponent="registry")

    def get_provider(self, name: str) -> Provider:
        """Return the cached provider for a name.

        Raises:
            NoCredentialsError: If the provider is unknown or has no API key.
        """
        with self._lock:
            if name in self._providers:
                return self._providers[name]

            provider_cls = _PROVIDER_CLASSES.get(name)
            if provider_cls is None:
                msg = f"Unknown provider: {name}"
                raise NoCredentialsError(msg)

            api_key = self._settings.api_key_for_provider(name)
            if not api_key:
                msg = f"No API key configured for provider: {name}"
                raise NoCredentialsError(msg)

            provider: Provider = provider_cls(
                api_key, max_tokens=self._settings.max_tokens
            )
            self._providers[name] = provider
            self._log.debug("provider_created", provider=name)
            return provider
