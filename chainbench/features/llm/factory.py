"""Factory for creating LLM classifier clients."""

import structlog

from chainbench.features.llm.errors import LlmAuthError
from chainbench.features.llm.prompts import CLASSIFICATION_SCHEMA_JSON
from chainbench.features.llm.protocols import LlmClient


logger = structlog.get_logger()

CLIENT_CLAUDE_CLI = "claude-cli"
CLIENT_GEMINI = "gemini"
CLIENT_NAMES = (CLIENT_CLAUDE_CLI, CLIENT_GEMINI)


def create_llm_client(
    name: str = CLIENT_CLAUDE_CLI,
    *,
    model: str | None = None,
    api_key: str | None = None,
) -> LlmClient:
    """Create the LLM client used for chain classification.

    Args:
        name: ``claude-cli`` (local subscription) or ``gemini`` (API key).
        model: Classifier model identifier.
        api_key: Gemini API key, required for ``gemini``.

    Returns:
        An LlmClient implementation ready for use.

    Raises:
        LlmAuthError: If ``gemini`` is chosen without an API key.
        ValueError: If the client name is unknown.
    """
    log = logger.bind(component="llm", subcomponent="factory")

    if name == CLIENT_CLAUDE_CLI:
        from chainbench.features.llm.claude_cli import ClaudeCliClient

        log.info("llm_client_created", client=name, model=model)
        return ClaudeCliClient(model=model, json_schema=CLASSIFICATION_SCHEMA_JSON)

    if name == CLIENT_GEMINI:
        if not api_key:
            msg = "No Gemini credentials configured (need GEMINI_API_KEY)"
            raise LlmAuthError(msg)

        from chainbench.features.llm.gemini_client import GeminiApiKeyClient

        log.info("llm_client_created", client=name, model=model)
        if model:
            return GeminiApiKeyClient(api_key=api_key, model=model)
        return GeminiApiKeyClient(api_key=api_key)

    msg = f"Unknown LLM client: {name} (expected one of {', '.join(CLIENT_NAMES)})"
    raise ValueError(msg)
