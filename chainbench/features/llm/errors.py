"""Domain-specific error types for the LLM classifier module."""


class LlmAuthError(Exception):
    """Missing or unusable credentials for an LLM client."""


class LlmApiError(Exception):
    """LLM call failure.

    Attributes:
        status_code: HTTP status code or process exit code, 0 if unknown.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class LlmProcessingError(Exception):
    """Response parsing or processing failure."""


class LlmClassificationError(Exception):
    """Every classification call for a response failed."""
