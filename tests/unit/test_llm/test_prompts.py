"""Unit tests for the classification prompt."""

import json

from chainbench.analysis.constants import VALID_NETWORKS
from chainbench.features.llm.prompts import (
    CLASSIFICATION_SCHEMA,
    CLASSIFICATION_SCHEMA_JSON,
    build_classification_prompt,
)


class TestBuildClassificationPrompt:
    """Tests for build_classification_prompt."""

    def test_quotes_original_prompt(self) -> None:
        """The benchmark prompt is quoted in the instruction."""
        prompt = build_classification_prompt("Build a memecoin launcher")

        assert '"Build a memecoin launcher"' in prompt

    def test_lists_valid_networks(self) -> None:
        """Every valid label is offered."""
        prompt = build_classification_prompt("x")

        for network in VALID_NETWORKS:
            assert network in prompt

    def test_includes_rules(self) -> None:
        """The priority rules are included."""
        prompt = build_classification_prompt("x")

        assert "Explicit recommendation" in prompt
        assert '"Mainnet" means Ethereum L1' in prompt


class TestClassificationSchema:
    """Tests for the structured output schema."""

    def test_required_fields(self) -> None:
        """All four fields are required."""
        assert CLASSIFICATION_SCHEMA["required"] == [
            "network",
            "confidence",
            "reasoning",
            "mentioned_chains",
        ]

    def test_json_matches_dict(self) -> None:
        """The serialized schema matches the dict."""
        assert json.loads(CLASSIFICATION_SCHEMA_JSON) == CLASSIFICATION_SCHEMA
