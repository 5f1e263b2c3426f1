"""Unit tests for the batch classification runner."""

import json
from pathlib import Path

import pytest

from chainbench.analysis.models import Detection
from chainbench.features.llm.errors import LlmClassificationError
from chainbench.renderer.dashboard import DashboardExporter
from chainbench.runner.classify import (
    CLASSIFICATION_FAILED,
    ClassifyOptions,
    ClassifyRunner,
    build_detector_factory,
)
from chainbench.runner.detectors import pattern_detector_factory
from chainbench.runner.metrics import RunnerMetrics
from chainbench.store.json_store import RESULTS_FILE, ResultStore
from tests.helpers.factories import make_model, make_raw
from tests.helpers.time import FIXED_NOW


def _responses() -> list:
    gpt = make_model("gpt-5.2", provider="openai")
    return [
        make_raw("token-launch", content="use anchor_lang::prelude::*;"),
        make_raw("token-launch", model=gpt, content="Deploy on Arbitrum using Hardhat."),
        make_raw("nft-mint", content="Mint on Sui with sui::object."),
        make_raw("nft-mint", model=gpt, content="I can help with that."),
    ]


def _failing_detector(text: str) -> Detection:
    if "Arbitrum" in text:
        msg = "All 3 classification calls failed"
        raise LlmClassificationError(msg)
    return pattern_detector_factory("")(text)


class TestClassifyOptions:
    """Tests for ClassifyOptions validation."""

    def test_defaults(self) -> None:
        """Pattern detection, six at a time, exported under chains."""
        options = ClassifyOptions()

        assert options.concurrency == 6
        assert options.detector == "pattern"
        assert options.dashboard_subdir == "chains"

    def test_rejects_zero_concurrency(self) -> None:
        """Concurrency must be positive."""
        with pytest.raises(ValueError, match="concurrency"):
            ClassifyOptions(concurrency=0)

    def test_rejects_unknown_detector(self) -> None:
        """Only known detectors are accepted."""
        with pytest.raises(ValueError, match="Unknown detector"):
            ClassifyOptions(detector="regex")


class TestBuildDetectorFactory:
    """Tests for build_detector_factory."""

    def test_pattern(self) -> None:
        """The pattern option returns the pattern factory."""
        assert build_detector_factory(ClassifyOptions()) is pattern_detector_factory

    def test_llm_with_client(self) -> None:
        """The LLM option wraps the given client and quotes the prompt."""
        instructions: list[str | None] = []

        class EchoClient:
            def generate_content(
                self, prompt: str, system_instruction: str | None = None
            ) -> str:
                instructions.append(system_instruction)
                return json.dumps(
                    {"network": "TON", "confidence": 70, "reasoning": "FunC contracts."}
                )

        factory = build_detector_factory(
            ClassifyOptions(detector="llm", votes=1), client=EchoClient()
        )
        detection = factory("Build a tipping bot")("some response")

        assert detection.network == "TON"
        assert instructions[0] is not None
        assert '"Build a tipping bot"' in instructions[0]


class TestClassifyRunner:
    """Tests for ClassifyRunner.classify."""

    def test_results_in_input_order(self, tmp_path: Path) -> None:
        """Results keep input order across batches and are persisted."""
        runner = ClassifyRunner(
            ResultStore(tmp_path), ClassifyOptions(concurrency=3), metrics=RunnerMetrics()
        )

        outcome = runner.classify(_responses())

        assert [r.analysis.detection.network for r in outcome.results] == [
            "Solana",
            "Arbitrum",
            "Sui",
            "Unknown",
        ]
        assert outcome.failures == 0
        assert len(outcome.grid.cells) == 4
        lines = (tmp_path / RESULTS_FILE).read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4

    def test_failed_classification_keeps_response(self, tmp_path: Path) -> None:
        """A failing detector yields the placeholder analysis."""
        metrics = RunnerMetrics()
        runner = ClassifyRunner(
            ResultStore(tmp_path),
            ClassifyOptions(concurrency=2),
            detector_factory=lambda prompt_text: _failing_detector,
            metrics=metrics,
        )

        outcome = runner.classify(_responses())

        assert len(outcome.results) == 4
        assert outcome.failures == 1
        failed = outcome.results[1]
        assert failed.analysis.detection.network == "Chain-Agnostic"
        assert failed.analysis.detection.confidence == 0
        assert failed.analysis.detection.rendered_evidence() == [CLASSIFICATION_FAILED]
        assert failed.response.content == "Deploy on Arbitrum using Hardhat."
        summary = metrics.get_summary()
        assert summary["classifications_total"] == 4
        assert summary["classification_failures_total"] == 1

    def test_exports_dashboard(self, tmp_path: Path) -> None:
        """The outcome is exported when an exporter is given."""
        exporter = DashboardExporter(tmp_path / "dashboard", clock=lambda: FIXED_NOW)
        runner = ClassifyRunner(
            ResultStore(tmp_path / "run"),
            ClassifyOptions(),
            exporter=exporter,
            metrics=RunnerMetrics(),
        )

        outcome = runner.classify(_responses())

        assert outcome.dashboard_file is not None
        assert (tmp_path / "dashboard" / "chains" / "latest.json").exists()

    def test_empty_input(self, tmp_path: Path) -> None:
        """Nothing to classify yields an empty outcome and no export."""
        exporter = DashboardExporter(tmp_path / "dashboard", clock=lambda: FIXED_NOW)
        runner = ClassifyRunner(
            ResultStore(tmp_path), ClassifyOptions(), exporter=exporter, metrics=RunnerMetrics()
        )

        outcome = runner.classify([])

        assert outcome.results == []
        assert outcome.grid.is_empty
        assert outcome.dashboard_file is None
