"""Google Gemini generateContent provider."""

import time

import structlog

from chainbench.providers.base import post_json
from chainbench.store.models import ProviderResponse


logger = structlog.get_logger()

_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider:
    """Sends prompts to Gemini models, optionally grounded with Google Search."""

    name = "google"

    def __init__(self, api_key: str, max_tokens: int = 4096) -> None:
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._log = logger.bind(component="providers", subcomponent="gemini")

    def build_request(self, prompt: str, web_search: bool) -> dict[str, object]:
        """Build the generateContent request body."""
        body: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"maxOutputTokens": self._max_tokens},
        }
        if web_search:
            body["tools"] = [{"google_search": {}}]
        return body

    def send(
        self,
        prompt: str,
        model: str,
        web_search: bool = False,
    ) -> ProviderResponse:
        """Send a prompt and join the text parts of the first candidate."""
        start = time.perf_counter()
        data = post_json(
            f"{_BASE_URL}/{model}:generateContent",
            headers={
                "x-goog-api-key": self._api_key,
                "Content-Type": "application/json",
            },
            body=self.build_request(prompt, web_search),
            provider=self.name,
        )
        latency_ms = int((time.perf_counter() - start) * 1000)

        candidates = data.get("candidates") or []
        parts = candidates[0].get("content", {}).get("parts", []) if candidates else []
        content = "".join(
            part.get("text", "")
            for part in parts
            if isinstance(part, dict) and not part.get("thought")
        )
        usage = data.get("usageMetadata") or {}
        tokens = int(usage.get("promptTokenCount", 0)) + int(
            usage.get("candidatesTokenCount", 0)
        )

        self._log.debug(
            "provider_call_complete",
            model=model,
            latency_ms=latency_ms,
            tokens=tokens,
            web_search=web_search,
        )
        return ProviderResponse(
            content=content,
            model=model,
            provider=self.name,
            tokens_used=tokens,
            latency_ms=latency_ms,
        )
