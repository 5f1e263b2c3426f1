"""Benchmark runner: sends prompts to providers and persists responses.

Providers run in parallel on a thread pool. Within a provider, calls
are sequential (prompts outer, models inner) with a per-provider pause
so that a single API key is never hammered.
"""

import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog

from chainbench.analysis.analyzer import analyze_response
from chainbench.data_model.timestamps import iso_timestamp
from chainbench.grid.builder import build_grid
from chainbench.grid.models import Grid
from chainbench.providers.errors import NoCredentialsError
from chainbench.providers.registry import ProviderRegistry
from chainbench.providers.retry import get_delay, send_with_retry
from chainbench.runner.detectors import DetectorFactory, pattern_detector_factory
from chainbench.runner.metrics import RunnerMetrics
from chainbench.runner.state_machine import RunStateMachine
from chainbench.store.json_store import ResultStore
from chainbench.store.models import (
    BenchmarkResult,
    ModelConfig,
    Prompt,
    ProviderResponse,
    RawResponse,
)


logger = structlog.get_logger()

COST_PER_CALL_LOW = 0.15
COST_PER_CALL_HIGH = 0.30


@dataclass(frozen=True)
class DryRunPlan:
    """What a run would do, without calling any provider.

    Attributes:
        prompts: Prompts to send.
        models: Models to call.
        runs: Repetitions per (prompt, model).
        web_search: Whether web search is enabled.
    """

    prompts: tuple[Prompt, ...]
    models: tuple[ModelConfig, ...]
    runs: int
    web_search: bool = False

    @property
    def total_calls(self) -> int:
        """Number of provider calls the run would make."""
        return len(self.prompts) * len(self.models) * self.runs

    @property
    def estimated_cost(self) -> tuple[float, float]:
        """Low and high cost estimate in USD."""
        return (
            self.total_calls * COST_PER_CALL_LOW,
            self.total_calls * COST_PER_CALL_HIGH,
        )


@dataclass
class RunOutcome:
    """Records produced by a run.

    Attributes:
        results: Classified results (empty for collect-only runs).
        responses: Raw responses (collect-only runs).
        grid: Grid built from ``results``.
        failures: Calls that failed after retries.
        skipped: Calls skipped because a provider had no credentials.
    """

    results: list[BenchmarkResult] = field(default_factory=list)
    responses: list[RawResponse] = field(default_factory=list)
    grid: Grid = field(default_factory=Grid)
    failures: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class _CallContext:
    run_id: str
    web_search: bool
    total_calls: int
    handle: Callable[[RawResponse], RawResponse]


@dataclass
class _ProviderOutcome:
    records: list[RawResponse] = field(default_factory=list)
    failures: int = 0
    skipped: int = 0


def group_by_provider(models: Sequence[ModelConfig]) -> dict[str, list[ModelConfig]]:
    """Group models by provider, keeping first-seen order."""
    groups: dict[str, list[ModelConfig]] = {}
    for model in models:
        groups.setdefault(model.provider, []).append(model)
    return groups


def _default_clock_ms() -> int:
    return int(time.time() * 1000)


class BenchmarkRunner:
    """Runs prompts against models and stores what comes back."""

    def __init__(  # noqa: PLR0913
        self,
        registry: ProviderRegistry,
        store: ResultStore,
        detector_factory: DetectorFactory = pattern_detector_factory,
        metrics: RunnerMetrics | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock_ms: Callable[[], int] = _default_clock_ms,
    ) -> None:
        """Initialize the runner.

        Args:
            registry: Provider registry.
            store: Store for responses and results.
            detector_factory: Detector per prompt text.
            metrics: Optional metrics instance.
            sleep: Sleep function used for pacing and retries.
            clock_ms: Millisecond clock used in run ids.
        """
        self._registry = registry
        self._store = store
        self._detector_factory = detector_factory
        self._metrics = metrics or RunnerMetrics.get_instance()
        self._sleep = sleep
        self._clock_ms = clock_ms
        self._progress_lock = threading.Lock()
        self._completed = 0
        self._log = logger.bind(component="runner", subcomponent="benchmark")

    def plan(
        self,
        prompts: Sequence[Prompt],
        models: Sequence[ModelConfig],
        runs: int = 1,
        web_search: bool = False,
    ) -> DryRunPlan:
        """Describe a run without executing it."""
        return DryRunPlan(tuple(prompts), tuple(models), runs, web_search)

    def run(  # noqa: PLR0913
        self,
        prompts: Sequence[Prompt],
        models: Sequence[ModelConfig],
        runs: int = 1,
        web_search: bool = False,
        dry_run: bool = False,
    ) -> RunOutcome:
        """Collect, analyze and persist results, then build the grid.

        Each result is saved as soon as it is analyzed.

        Raises:
            NoCredentialsError: If no models are selected.
        """
        if dry_run:
            self._log_plan(self.plan(prompts, models, runs, web_search))
            return RunOutcome()

        machine = RunStateMachine(f"benchmark-{self._clock_ms()}")
        machine.to_collecting()
        try:
            records, failures, skipped = self._execute(
                prompts, models, runs, web_search, self._analyze_and_save
            )
        except Exception:
            machine.to_failed()
            raise
        results = [r for r in records if isinstance(r, BenchmarkResult)]

        machine.to_aggregating()
        grid = build_grid(results)
        machine.to_done()
        return RunOutcome(results=results, grid=grid, failures=failures, skipped=skipped)

    def collect_responses(  # noqa: PLR0913
        self,
        prompts: Sequence[Prompt],
        models: Sequence[ModelConfig],
        runs: int = 1,
        web_search: bool = False,
        dry_run: bool = False,
    ) -> RunOutcome:
        """Collect and persist raw responses without classifying them.

        Raises:
            NoCredentialsError: If no models are selected.
        """
        if dry_run:
            self._log_plan(self.plan(prompts, models, runs, web_search))
            return RunOutcome()

        machine = RunStateMachine(f"collect-{self._clock_ms()}")
        machine.to_collecting()
        try:
            records, failures, skipped = self._execute(
                prompts, models, runs, web_search, self._save_response
            )
        except Exception:
            machine.to_failed()
            raise
        machine.to_done()
        return RunOutcome(responses=records, failures=failures, skipped=skipped)

    def _log_plan(self, plan: DryRunPlan) -> None:
        low, high = plan.estimated_cost
        self._log.info(
            "dry_run_plan",
            prompt_count=len(plan.prompts),
            model_count=len(plan.models),
            runs=plan.runs,
            web_search=plan.web_search,
            total_calls=plan.total_calls,
            estimated_cost_usd=f"{low:.2f}-{high:.2f}",
        )

    def _analyze_and_save(self, raw: RawResponse) -> RawResponse:
        detector = self._detector_factory(raw.prompt_text)
        result = raw.with_analysis(analyze_response(raw.response.content, detector))
        self._store.save_result(result)
        detection = result.analysis.detection
        self._log.info(
            "result_classified",
            model_id=raw.model.id,
            prompt_id=raw.prompt_id,
            ecosystem=detection.ecosystem,
            network=detection.network,
            strength=detection.strength.value,
            latency_s=round(raw.response.latency_ms / 1000, 1),
        )
        return result

    def _save_response(self, raw: RawResponse) -> RawResponse:
        self._store.save_response(raw)
        self._log.info(
            "response_collected",
            model_id=raw.model.id,
            prompt_id=raw.prompt_id,
            latency_s=round(raw.response.latency_ms / 1000, 1),
            tokens=raw.response.tokens_used,
        )
        return raw

    def _execute(  # noqa: PLR0913
        self,
        prompts: Sequence[Prompt],
        models: Sequence[ModelConfig],
        runs: int,
        web_search: bool,
        handle: Callable[[RawResponse], RawResponse],
    ) -> tuple[list[RawResponse], int, int]:
        if not models:
            msg = "No models available: set at least one provider API key"
            raise NoCredentialsError(msg)

        groups = group_by_provider(models)
        total_calls = len(prompts) * len(models) * runs
        self._completed = 0
        self._log.info(
            "run_started",
            providers=list(groups),
            total_calls=total_calls,
            runs=runs,
            web_search=web_search,
        )

        records: list[RawResponse] = []
        failures = 0
        skipped = 0
        for run_index in range(runs):
            run_id = f"run-{self._clock_ms()}-{run_index}"
            self._log.info("run_iteration_started", run_id=run_id, iteration=run_index + 1)

            with ThreadPoolExecutor(max_workers=len(groups)) as executor:
                futures = [
                    executor.submit(
                        self._run_provider,
                        provider_name,
                        provider_models,
                        prompts,
                        _CallContext(run_id, web_search, total_calls, handle),
                    )
                    for provider_name, provider_models in groups.items()
                ]
                for future in futures:
                    outcome = future.result()
                    records.extend(outcome.records)
                    failures += outcome.failures
                    skipped += outcome.skipped

        self._log.info(
            "run_complete",
            record_count=len(records),
            failures=failures,
            skipped=skipped,
        )
        return records, failures, skipped

    def _next_progress(self) -> int:
        with self._progress_lock:
            self._completed += 1
            return self._completed

    def _run_provider(
        self,
        provider_name: str,
        models: Sequence[ModelConfig],
        prompts: Sequence[Prompt],
        ctx: _CallContext,
    ) -> _ProviderOutcome:
        outcome = _ProviderOutcome()
        try:
            provider = self._registry.get_provider(provider_name)
        except NoCredentialsError as e:
            for model in models:
                for _ in prompts:
                    self._next_progress()
                    outcome.skipped += 1
                self._log.warning(
                    "provider_skipped",
                    provider=provider_name,
                    model_id=model.id,
                    reason=str(e),
                )
            return outcome

        for prompt in prompts:
            for model in models:
                progress = self._next_progress()
                self._log.info(
                    "provider_call_started",
                    progress=f"{progress}/{ctx.total_calls}",
                    model_id=model.id,
                    prompt_id=prompt.id,
                )
                try:
                    response = send_with_retry(
                        provider,
                        prompt.text,
                        model.id,
                        ctx.web_search,
                        sleep=self._sleep,
                        on_retry=lambda: self._metrics.record_retry(provider_name),
                    )
                    self._metrics.record_call(provider_name, model.id, response.latency_ms)
                    raw = self._to_raw(prompt, model, response, ctx)
                    outcome.records.append(ctx.handle(raw))
                except Exception as e:  # noqa: BLE001
                    self._metrics.record_call_failure(provider_name)
                    outcome.failures += 1
                    self._log.error(
                        "provider_call_failed",
                        provider=provider_name,
                        model_id=model.id,
                        prompt_id=prompt.id,
                        error=str(e),
                    )

                self._sleep(get_delay(provider_name))
        return outcome

    @staticmethod
    def _to_raw(
        prompt: Prompt,
        model: ModelConfig,
        response: ProviderResponse,
        ctx: _CallContext,
    ) -> RawResponse:
        return RawResponse(
            prompt_id=prompt.id,
            prompt_text=prompt.text,
            prompt_category=prompt.category,
            model=model,
            response=response,
            timestamp=iso_timestamp(),
            run_id=ctx.run_id,
            web_search=ctx.web_search,
        )
