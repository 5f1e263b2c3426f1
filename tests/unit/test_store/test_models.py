"""Unit tests for stored record models."""

from chainbench.store.models import BenchmarkResult, RawResponse
from tests.helpers.factories import make_analysis, make_raw, make_result


class TestRecords:
    """Tests for RawResponse and BenchmarkResult."""

    def test_camel_case_on_disk(self) -> None:
        """Records serialize with camelCase keys."""
        data = make_raw().to_json_dict()

        assert "promptId" in data
        assert "webSearch" in data
        assert data["response"]["latencyMs"] == 1000

    def test_loads_snake_and_camel_case(self) -> None:
        """Either key style is accepted on load."""
        raw = make_raw()
        from_camel = RawResponse.model_validate(raw.to_json_dict())
        from_snake = RawResponse.model_validate(raw.model_dump())

        assert from_camel == raw
        assert from_snake == raw

    def test_with_analysis(self) -> None:
        """Attaching an analysis produces a result."""
        result = make_raw().with_analysis(make_analysis(network="Sui"))

        assert isinstance(result, BenchmarkResult)
        assert result.analysis.detection.network == "Sui"

    def test_with_analysis_replaces_existing(self) -> None:
        """Reclassifying a result replaces its analysis."""
        result = make_result(network="Base")

        updated = result.with_analysis(make_analysis(network="TON"))

        assert updated.analysis.detection.network == "TON"
        assert result.analysis.detection.network == "Base"

    def test_to_raw_drops_analysis(self) -> None:
        """to_raw keeps the collected response only."""
        result = make_result()

        raw = result.to_raw()

        assert type(raw) is RawResponse
        assert raw.prompt_id == result.prompt_id
        assert raw.response == result.response
