"""Unit tests for renderer models."""

import pytest
from pydantic import ValidationError

from chainbench.renderer.models import DashboardRunMeta, GeneratedFile, RunIndexEntry


class TestGeneratedFile:
    """Tests for GeneratedFile dataclass."""

    def test_is_frozen(self) -> None:
        """GeneratedFile is immutable."""
        generated = GeneratedFile(
            path="report.md", absolute_path="/tmp/report.md", bytes_written=3, sha256="abc"
        )

        with pytest.raises(AttributeError):
            generated.path = "other.md"  # type: ignore[misc]


class TestDashboardRunMeta:
    """Tests for DashboardRunMeta."""

    def test_camel_case_keys(self) -> None:
        """Serialized keys are camelCase."""
        meta = DashboardRunMeta(
            timestamp="2026-01-31T12:00:00.000Z",
            run_id="run-1-0",
            model_count=2,
            prompt_count=3,
            result_count=6,
        )

        assert meta.to_json_dict() == {
            "timestamp": "2026-01-31T12:00:00.000Z",
            "runId": "run-1-0",
            "modelCount": 2,
            "promptCount": 3,
            "resultCount": 6,
            "webSearch": False,
        }

    def test_negative_counts_rejected(self) -> None:
        """Counts cannot be negative."""
        with pytest.raises(ValidationError):
            DashboardRunMeta(
                timestamp="t", run_id="r", model_count=-1, prompt_count=0, result_count=0
            )


class TestRunIndexEntry:
    """Tests for RunIndexEntry."""

    def test_accepts_camel_case_input(self) -> None:
        """Entries read back from runs.json validate."""
        entry = RunIndexEntry.model_validate(
            {"timestamp": "t", "runId": "r", "filename": "run-x.json", "resultCount": 4}
        )

        assert entry.run_id == "r"
        assert entry.result_count == 4
        assert entry.web_search is False

    def test_missing_filename_rejected(self) -> None:
        """filename is required."""
        with pytest.raises(ValidationError):
            RunIndexEntry.model_validate({"timestamp": "t", "runId": "r"})
