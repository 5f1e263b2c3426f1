"""Shared JSON parsing utilities for LLM response handling.

Classifier output arrives either as bare JSON, as JSON wrapped in
markdown fences, or inside the CLI's result envelope.
"""

from __future__ import annotations

import json
import re

from chainbench.features.llm.errors import LlmProcessingError


def fix_escape_sequences(text: str) -> str:
    """Fix invalid JSON escape sequences in LLM output.

    LLMs sometimes produce backslash sequences like ``\\_`` that are
    invalid in JSON strings. This replaces lone backslashes with
    double-backslashes where they don't form a valid JSON escape.
    """
    return re.sub(r'(?<!\\)\\(?!["\\/bfnrtu])', r"\\\\", text)


def strip_markdown_fences(text: str) -> str:
    """Strip markdown code fences from LLM response text."""
    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1 :]
        if text.endswith("```"):
            text = text[: -len("```")]
        text = text.strip()
    return text


def parse_json_object(text: str) -> dict[str, object]:
    """Parse a JSON object from raw LLM output.

    Raises:
        LlmProcessingError: If no JSON object can be decoded.
    """
    cleaned = strip_markdown_fences(text)
    for candidate in (cleaned, fix_escape_sequences(cleaned)):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    msg = f"Expected a JSON object, got: {cleaned[:200]}"
    raise LlmProcessingError(msg)


def unwrap_structured_output(payload: dict[str, object]) -> dict[str, object]:
    """Return the structured output from a CLI envelope.

    Looks under ``result.structured_output``, then ``structured_output``,
    and falls back to the payload itself.
    """
    result = payload.get("result")
    if isinstance(result, dict) and isinstance(result.get("structured_output"), dict):
        return result["structured_output"]
    structured = payload.get("structured_output")
    if isinstance(structured, dict):
        return structured
    return payload
