"""Retry and pacing policy for provider calls."""

import time
from collections.abc import Callable

import structlog

from chainbench.providers.base import Provider
from chainbench.providers.errors import ProviderError
from chainbench.store.models import ProviderResponse


logger = structlog.get_logger()

MAX_RETRIES = 3
RETRY_DELAYS_S: tuple[float, ...] = (5.0, 15.0, 30.0)

DEFAULT_DELAY_S = 2.0
PROVIDER_DELAYS_S: dict[str, float] = {
    "anthropic": 2.0,
    "openai": 1.5,
    "google": 1.0,
}


def get_delay(provider: str) -> float:
    """Pause between consecutive calls to the same provider, in seconds."""
    return PROVIDER_DELAYS_S.get(provider, DEFAULT_DELAY_S)


def send_with_retry(
    provider: Provider,
    prompt: str,
    model: str,
    web_search: bool = False,
    *,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Callable[[], None] | None = None,
) -> ProviderResponse:
    """Send a prompt, retrying transient capacity errors.

    Args:
        provider: Provider to call.
        prompt: Prompt text.
        model: Model identifier.
        web_search: Whether to enable web search grounding.
        sleep: Sleep function, injectable for tests.
        on_retry: Optional callback invoked before each retry.

    Returns:
        The provider response.

    Raises:
        ProviderError: If the error is not retryable or retries are exhausted.
    """
    log = logger.bind(component="providers", subcomponent="retry")
    for attempt in range(MAX_RETRIES + 1):
        try:
            return provider.send(prompt, model, web_search)
        except ProviderError as e:
            if not e.retryable or attempt == MAX_RETRIES:
                raise
            wait_s = RETRY_DELAYS_S[attempt]
            log.warning(
                "provider_retry_scheduled",
                provider=provider.name,
                model=model,
                attempt=attempt + 1,
                max_retries=MAX_RETRIES,
                retry_delay_s=wait_s,
                error=str(e)[:80],
            )
            if on_retry is not None:
                on_retry()
            sleep(wait_s)
    msg = "Retry loop exited without a response"
    raise ProviderError(msg, provider=provider.name)
