"""Error types for model provider calls."""

import re
from http import HTTPStatus


RETRYABLE_STATUS_CODES = frozenset(
    {HTTPStatus.TOO_MANY_REQUESTS, HTTPStatus.SERVICE_UNAVAILABLE}
)
_RETRYABLE_MESSAGE = re.compile(
    r"503|429|overloaded|high demand|rate limit", re.IGNORECASE
)


class ProviderError(Exception):
    """A provider API call failed.

    Attributes:
        status_code: HTTP status code, 0 when no response was received.
        provider: Provider name.
    """

    def __init__(self, message: str, status_code: int = 0, provider: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider = provider

    @property
    def retryable(self) -> bool:
        """Whether the failure is transient capacity or rate limiting."""
        if self.status_code in RETRYABLE_STATUS_CODES:
            return True
        return bool(_RETRYABLE_MESSAGE.search(str(self)))


class NoCredentialsError(Exception):
    """No provider credentials are available for the selected models."""
