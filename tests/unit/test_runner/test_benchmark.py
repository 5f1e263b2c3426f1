"""Unit tests for the benchmark runner."""

import json
import threading
from pathlib import Path

import pytest

from chainbench.providers.errors import NoCredentialsError, ProviderError
from chainbench.runner.benchmark import BenchmarkRunner, group_by_provider
from chainbench.runner.metrics import RunnerMetrics
from chainbench.store.json_store import RESPONSES_FILE, RESULTS_FILE, ResultStore
from chainbench.store.models import BenchmarkResult, ModelTier, Prompt, ProviderResponse
from tests.helpers.factories import make_model


SOLANA_TEXT = "use anchor_lang::prelude::*;"


class FakeProvider:
    """Provider returning canned text; scripted errors are raised first."""

    def __init__(self, name: str, errors: dict[str, list[Exception]] | None = None) -> None:
        self.name = name
        self._errors = errors or {}
        self._lock = threading.Lock()
        self.calls: list[tuple[str, str, bool]] = []

    def send(self, prompt: str, model: str, web_search: bool = False) -> ProviderResponse:
        with self._lock:
            self.calls.append((prompt, model, web_search))
            pending = self._errors.get(model)
            if pending:
                raise pending.pop(0)
        return ProviderResponse(
            content=SOLANA_TEXT,
            model=model,
            provider=self.name,
            tokens_used=42,
            latency_ms=1200,
        )


class FakeRegistry:
    """Registry serving only the given providers."""

    def __init__(self, *providers: FakeProvider) -> None:
        self._providers = {p.name: p for p in providers}

    def get_provider(self, name: str) -> FakeProvider:
        if name not in self._providers:
            msg = f"No API key configured for provider: {name}"
            raise NoCredentialsError(msg)
        return self._providers[name]


@pytest.fixture
def prompts() -> list[Prompt]:
    """Two prompts."""
    return [
        Prompt(id="token-launch", text="Build a token launch app.", category="DeFi"),
        Prompt(id="nft-mint", text="Build an NFT mint.", category="NFT"),
    ]


@pytest.fixture
def sleeps() -> list[float]:
    """Recorded sleep durations."""
    return []


def _runner(registry: FakeRegistry, tmp_path: Path, sleeps: list[float]) -> BenchmarkRunner:
    return BenchmarkRunner(
        registry,  # type: ignore[arg-type]
        ResultStore(tmp_path),
        metrics=RunnerMetrics(),
        sleep=sleeps.append,
        clock_ms=lambda: 1000,
    )


class TestGroupByProvider:
    """Tests for group_by_provider."""

    def test_first_seen_order(self) -> None:
        """Providers keep first-seen order."""
        models = [
            make_model("gpt-5.2", provider="openai"),
            make_model("claude-opus-4-6"),
            make_model("gpt-5-mini", provider="openai", tier=ModelTier.MID_TIER),
        ]

        groups = group_by_provider(models)

        assert list(groups) == ["openai", "anthropic"]
        assert [m.id for m in groups["openai"]] == ["gpt-5.2", "gpt-5-mini"]


class TestBenchmarkRunnerRun:
    """Tests for BenchmarkRunner.run."""

    def test_collects_and_classifies(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Every (prompt, model) pair produces a stored, classified result."""
        provider = FakeProvider("anthropic")
        models = [
            make_model("claude-opus-4-6"),
            make_model("claude-sonnet-4-5", tier=ModelTier.MID_TIER),
        ]

        outcome = _runner(FakeRegistry(provider), tmp_path, sleeps).run(prompts, models)

        assert len(outcome.results) == 4
        assert all(isinstance(r, BenchmarkResult) for r in outcome.results)
        assert {r.analysis.detection.network for r in outcome.results} == {"Solana"}
        assert [(r.prompt_id, r.model.id) for r in outcome.results] == [
            ("token-launch", "claude-opus-4-6"),
            ("token-launch", "claude-sonnet-4-5"),
            ("nft-mint", "claude-opus-4-6"),
            ("nft-mint", "claude-sonnet-4-5"),
        ]
        assert outcome.results[0].run_id == "run-1000-0"
        assert outcome.results[0].prompt_category == "DeFi"
        assert len(outcome.grid.cells) == 4

        lines = (tmp_path / RESULTS_FILE).read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4
        assert json.loads(lines[0])["analysis"]["detection"]["network"] == "Solana"

    def test_paces_calls_per_provider(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Each call is followed by the provider's pause."""
        provider = FakeProvider("openai")

        _runner(FakeRegistry(provider), tmp_path, sleeps).run(
            prompts, [make_model("gpt-5.2", provider="openai")]
        )

        assert sleeps == [1.5, 1.5]

    def test_skips_provider_without_credentials(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Models of an unconfigured provider are skipped, not failed."""
        models = [make_model("claude-opus-4-6"), make_model("gpt-5.2", provider="openai")]

        outcome = _runner(FakeRegistry(FakeProvider("anthropic")), tmp_path, sleeps).run(
            prompts, models
        )

        assert len(outcome.results) == 2
        assert outcome.skipped == 2
        assert outcome.failures == 0
        assert {r.model.id for r in outcome.results} == {"claude-opus-4-6"}

    def test_failed_call_does_not_stop_run(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """A non-retryable failure is counted and the run continues."""
        provider = FakeProvider(
            "anthropic",
            errors={"claude-opus-4-6": [ProviderError("bad request", status_code=400)]},
        )
        metrics = RunnerMetrics()
        runner = BenchmarkRunner(
            FakeRegistry(provider),  # type: ignore[arg-type]
            ResultStore(tmp_path),
            metrics=metrics,
            sleep=sleeps.append,
            clock_ms=lambda: 1000,
        )

        outcome = runner.run(prompts, [make_model("claude-opus-4-6")])

        assert outcome.failures == 1
        assert [r.prompt_id for r in outcome.results] == ["nft-mint"]
        assert metrics.get_summary()["call_failures_total"] == 1

    def test_retries_capacity_errors(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Retryable errors back off and retry."""
        provider = FakeProvider(
            "anthropic",
            errors={"claude-opus-4-6": [ProviderError("overloaded", status_code=529)]},
        )
        metrics = RunnerMetrics()
        runner = BenchmarkRunner(
            FakeRegistry(provider),  # type: ignore[arg-type]
            ResultStore(tmp_path),
            metrics=metrics,
            sleep=sleeps.append,
            clock_ms=lambda: 1000,
        )

        outcome = runner.run(prompts[:1], [make_model("claude-opus-4-6")])

        assert len(outcome.results) == 1
        assert sleeps == [5.0, 2.0]
        assert metrics.get_summary()["retries_total"] == 1

    def test_repeated_runs_get_distinct_ids(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Each repetition has its own run id; the grid merges them."""
        outcome = _runner(FakeRegistry(FakeProvider("anthropic")), tmp_path, sleeps).run(
            prompts[:1], [make_model("claude-opus-4-6")], runs=2
        )

        assert [r.run_id for r in outcome.results] == ["run-1000-0", "run-1000-1"]
        cell = outcome.grid.cells["token-launch::claude-opus-4-6"]
        assert cell.run_count == 2

    def test_web_search_flag(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """The web search flag reaches the provider and the records."""
        provider = FakeProvider("anthropic")

        outcome = _runner(FakeRegistry(provider), tmp_path, sleeps).run(
            prompts[:1], [make_model("claude-opus-4-6")], web_search=True
        )

        assert provider.calls == [("Build a token launch app.", "claude-opus-4-6", True)]
        assert outcome.results[0].web_search is True

    def test_no_models(self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]) -> None:
        """Running without models raises."""
        with pytest.raises(NoCredentialsError):
            _runner(FakeRegistry(), tmp_path, sleeps).run(prompts, [])

    def test_dry_run_makes_no_calls(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """A dry run returns an empty outcome."""
        provider = FakeProvider("anthropic")

        outcome = _runner(FakeRegistry(provider), tmp_path, sleeps).run(
            prompts, [make_model("claude-opus-4-6")], dry_run=True
        )

        assert outcome.results == []
        assert provider.calls == []
        assert not (tmp_path / RESULTS_FILE).exists()


class TestBenchmarkRunnerPlan:
    """Tests for BenchmarkRunner.plan."""

    def test_totals_and_cost(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Calls multiply out and cost is estimated per call."""
        models = [make_model("claude-opus-4-6"), make_model("gpt-5.2", provider="openai")]

        plan = _runner(FakeRegistry(), tmp_path, sleeps).plan(prompts, models, runs=3)

        assert plan.total_calls == 12
        low, high = plan.estimated_cost
        assert low == pytest.approx(1.8)
        assert high == pytest.approx(3.6)


class TestCollectResponses:
    """Tests for BenchmarkRunner.collect_responses."""

    def test_stores_raw_responses(
        self, tmp_path: Path, prompts: list[Prompt], sleeps: list[float]
    ) -> None:
        """Responses are stored without analysis."""
        runner = _runner(FakeRegistry(FakeProvider("anthropic")), tmp_path, sleeps)

        outcome = runner.collect_responses(prompts, [make_model("claude-opus-4-6")])

        assert outcome.results == []
        assert len(outcome.responses) == 2
        lines = (tmp_path / RESPONSES_FILE).read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert "analysis" not in json.loads(lines[0])
        assert not (tmp_path / RESULTS_FILE).exists()
