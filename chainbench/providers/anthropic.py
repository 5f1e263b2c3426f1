"""Anthropic Messages API provider."""

import time

import structlog

from chainbench.providers.base import post_json
from chainbench.store.models import ProviderResponse


logger = structlog.get_logger()

_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
_API_VERSION = "2023-06-01"


class AnthropicProvider:
    """Sends prompts to Claude models through the Messages API."""

    name = "anthropic"

    def __init__(self, api_key: str, max_tokens: int = 4096) -> None:
        """Initialize the provider.

        Args:
            api_key: Anthropic API key.
            max_tokens: Output token budget per call.
        """
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._log = logger.bind(component="providers", subcomponent="anthropic")

    def send(
        self,
        prompt: str,
        model: str,
        web_search: bool = False,  # noqa: ARG002
    ) -> ProviderResponse:
        """Send a single user message.

        Web search is not offered for this provider and the flag is ignored.
        """
        start = time.perf_counter()
        data = post_json(
            _MESSAGES_URL,
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": _API_VERSION,
                "content-type": "application/json",
            },
            body={
                "model": model,
                "max_tokens": self._max_tokens,
                "messages": [{"role": "user", "content": prompt}],
            },
            provider=self.name,
        )
        latency_ms = int((time.perf_counter() - start) * 1000)

        blocks = data.get("content") or []
        content = "\n".join(
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        tokens = int(usage.get("input_tokens", 0)) + int(usage.get("output_tokens", 0))

        self._log.debug(
            "provider_call_complete", model=model, latency_ms=latency_ms, tokens=tokens
        )
        return ProviderResponse(
            content=content,
            model=model,
            provider=self.name,
            tokens_used=tokens,
            latency_ms=latency_ms,
        )
