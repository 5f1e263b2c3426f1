"""Unit tests for analyze_response."""

from chainbench.analysis.analyzer import analyze_response
from chainbench.analysis.models import Behavior, Detection


class TestAnalyzeResponse:
    """Tests for analyze_response."""

    def test_default_detector(self) -> None:
        """Without a detector the pattern detector is used."""
        result = analyze_response("use anchor_lang::prelude::*;")

        assert result.detection.network == "Solana"
        assert result.behavior.behavior == Behavior.JUST_BUILT
        assert result.completeness.has_contract

    def test_custom_detector(self) -> None:
        """Any callable returning a Detection can replace the detector."""
        calls: list[str] = []

        def fake_detector(text: str) -> Detection:
            calls.append(text)
            return Detection(network="TON", ecosystem="TON", confidence=90)

        result = analyze_response("some text", fake_detector)

        assert calls == ["some text"]
        assert result.detection.network == "TON"
