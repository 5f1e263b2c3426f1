"""Provider protocol and shared HTTP helper."""

from http import HTTPStatus
from typing import Protocol, runtime_checkable

import httpx

from chainbench.providers.errors import ProviderError
from chainbench.store.models import ProviderResponse


REQUEST_TIMEOUT = 300.0


@runtime_checkable
class Provider(Protocol):
    """A model API that answers a single user prompt."""

    name: str

    def send(
        self,
        prompt: str,
        model: str,
        web_search: bool = False,
    ) -> ProviderResponse:
        """Send one prompt and return the response text with usage.

        Raises:
            ProviderError: If the call fails.
        """
        ...


def post_json(
    url: str,
    *,
    headers: dict[str, str],
    body: dict[str, object],
    provider: str,
    timeout: float = REQUEST_TIMEOUT,
) -> dict[str, object]:
    """POST a JSON body and return the decoded JSON response.

    Raises:
        ProviderError: On transport errors, non-200 status or invalid JSON.
    """
    try:
        response = httpx.post(url, headers=headers, json=body, timeout=timeout)
    except httpx.HTTPError as exc:
        msg = f"{provider} request failed: {exc}"
        raise ProviderError(msg, provider=provider) from exc

    if response.status_code != HTTPStatus.OK:
        msg = f"{provider} API returned {response.status_code}: {response.text[:500]}"
        raise ProviderError(msg, status_code=response.status_code, provider=provider)

    try:
        data = response.json()
    except ValueError as exc:
        msg = f"{provider} API returned invalid JSON"
        raise ProviderError(msg, provider=provider) from exc
    if not isinstance(data, dict):
        msg = f"{provider} API returned unexpected payload"
        raise ProviderError(msg, provider=provider)
    return data
