"""OpenAI Chat Completions provider."""

import time

import structlog

from chainbench.providers.base import post_json
from chainbench.store.models import ProviderResponse


logger = structlog.get_logger()

_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"

# Reasoning models spend completion tokens on hidden chain-of-thought
REASONING_MODELS = frozenset({"gpt-5.2", "gpt-5-mini", "o3", "o3-mini", "o4-mini"})
REASONING_BUDGET = 8192


class OpenAIProvider:
    """Sends prompts to OpenAI models through Chat Completions."""

    name = "openai"

    def __init__(self, api_key: str, max_tokens: int = 4096) -> None:
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._log = logger.bind(component="providers", subcomponent="openai")

    def completion_budget(self, model: str) -> int:
        """Completion token limit for a model."""
        if model in REASONING_MODELS:
            return self._max_tokens + REASONING_BUDGET
        return self._max_tokens

    def send(
        self,
        prompt: str,
        model: str,
        web_search: bool = False,  # noqa: ARG002
    ) -> ProviderResponse:
        """Send a single user message and return the first choice."""
        start = time.perf_counter()
        data = post_json(
            _COMPLETIONS_URL,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            body={
                "model": model,
                "max_completion_tokens": self.completion_budget(model),
                "messages": [{"role": "user", "content": prompt}],
            },
            provider=self.name,
        )
        latency_ms = int((time.perf_counter() - start) * 1000)

        choices = data.get("choices") or []
        message = choices[0].get("message", {}) if choices else {}
        content = message.get("content") or ""
        usage = data.get("usage") or {}
        tokens = int(usage.get("prompt_tokens", 0)) + int(
            usage.get("completion_tokens", 0)
        )

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
