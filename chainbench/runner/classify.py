"""Batch classification of stored responses.

Responses are classified ``concurrency`` at a time; each batch settles
before the next starts. A response whose classification fails is kept
with a placeholder analysis and counted, so one bad call never drops
data. The grid is built only after every batch has settled.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog

from chainbench.analysis.analyzer import analyze_response
from chainbench.analysis.constants import CHAIN_AGNOSTIC_LABEL
from chainbench.analysis.models import (
    AnalysisResult,
    Behavior,
    BehaviorClassification,
    CompletenessScore,
    Detection,
    EvidenceItem,
    Strength,
)
from chainbench.features.llm.detector import DEFAULT_VOTES, LlmChainDetector
from chainbench.features.llm.factory import CLIENT_CLAUDE_CLI, create_llm_client
from chainbench.features.llm.protocols import LlmClient
from chainbench.grid.builder import build_grid
from chainbench.grid.models import Grid
from chainbench.renderer.dashboard import DashboardExporter
from chainbench.renderer.models import GeneratedFile
from chainbench.runner.detectors import (
    DETECTOR_LLM,
    DETECTOR_PATTERN,
    DetectorFactory,
    llm_detector_factory,
    pattern_detector_factory,
)
from chainbench.runner.metrics import RunnerMetrics
from chainbench.runner.state_machine import RunStateMachine
from chainbench.settings.app import AppSettings
from chainbench.store.json_store import ResultStore
from chainbench.store.models import BenchmarkResult, RawResponse


logger = structlog.get_logger()

DEFAULT_CONCURRENCY = 6
CLASSIFICATION_FAILED = "Classification failed"


def failed_analysis() -> AnalysisResult:
    """Placeholder analysis for a response that could not be classified."""
    return AnalysisResult(
        detection=Detection(
            network=CHAIN_AGNOSTIC_LABEL,
            ecosystem=CHAIN_AGNOSTIC_LABEL,
            confidence=0,
            strength=Strength.IMPLICIT,
            evidence=[EvidenceItem(label=CLASSIFICATION_FAILED)],
            scores={CHAIN_AGNOSTIC_LABEL: 1},
        ),
        behavior=BehaviorClassification(behavior=Behavior.JUST_BUILT),
        completeness=CompletenessScore(score=0),
    )


@dataclass(frozen=True)
class ClassifyOptions:
    """Options for a classification pass.

    Attributes:
        concurrency: Responses classified in parallel per batch.
        detector: ``pattern`` or ``llm``.
        classifier_model: Model used by the LLM detector.
        classifier_client: ``claude-cli`` or ``gemini``.
        votes: LLM calls per response.
        dashboard_subdir: Dashboard subdirectory for the export.
    """

    concurrency: int = DEFAULT_CONCURRENCY
    detector: str = DETECTOR_PATTERN
    classifier_model: str | None = None
    classifier_client: str = CLIENT_CLAUDE_CLI
    votes: int = DEFAULT_VOTES
    dashboard_subdir: str | None = "chains"

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            msg = "concurrency must be at least 1"
            raise ValueError(msg)
        if self.detector not in (DETECTOR_PATTERN, DETECTOR_LLM):
            msg = f"Unknown detector: {self.detector}"
            raise ValueError(msg)


@dataclass
class ClassifyOutcome:
    """Result of a classification pass.

    Attributes:
        results: One result per input response, in input order.
        failures: Responses that received the placeholder analysis.
        grid: Grid built from ``results``.
        dashboard_file: Exported dashboard run file, if exported.
    """

    results: list[BenchmarkResult] = field(default_factory=list)
    failures: int = 0
    grid: Grid = field(default_factory=Grid)
    dashboard_file: GeneratedFile | None = None


def build_detector_factory(
    options: ClassifyOptions,
    settings: AppSettings | None = None,
    client: LlmClient | None = None,
) -> DetectorFactory:
    """Create the detector factory described by the options.

    Args:
        options: Classification options.
        settings: Settings supplying the Gemini API key.
        client: Prebuilt LLM client, overriding ``classifier_client``.
    """
    if options.detector == DETECTOR_PATTERN:
        return pattern_detector_factory

    if client is None:
        client = create_llm_client(
            options.classifier_client,
            model=options.classifier_model,
            api_key=settings.gemini_api_key if settings else None,
        )
    return llm_detector_factory(LlmChainDetector(client, votes=options.votes))


class ClassifyRunner:
    """Classifies responses in batches and exports the outcome."""

    def __init__(
        self,
        store: ResultStore,
        options: ClassifyOptions,
        detector_factory: DetectorFactory | None = None,
        exporter: DashboardExporter | None = None,
        metrics: RunnerMetrics | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            store: Store receiving classified results.
            options: Classification options.
            detector_factory: Detector per prompt text; built from
                ``options`` when omitted.
            exporter: Optional dashboard exporter.
            metrics: Optional metrics instance.
        """
        self._store = store
        self._options = options
        self._detector_factory = detector_factory or build_detector_factory(options)
        self._exporter = exporter
        self._metrics = metrics or RunnerMetrics.get_instance()
        self._log = logger.bind(component="runner", subcomponent="classify")

    def classify(self, responses: Sequence[RawResponse]) -> ClassifyOutcome:
        """Classify every response, persist results, build and export the grid.

        Args:
            responses: Responses to classify.

        Returns:
            ClassifyOutcome with results in input order.
        """
        run_id = responses[0].run_id if responses else "classify"
        machine = RunStateMachine(run_id)
        machine.to_classifying()

        total = len(responses)
        concurrency = self._options.concurrency
        self._log.info(
            "classification_started",
            response_count=total,
            concurrency=concurrency,
            detector=self._options.detector,
            classifier_model=self._options.classifier_model,
        )

        outcome = ClassifyOutcome()
        try:
            with ThreadPoolExecutor(max_workers=concurrency) as executor:
                for batch_start in range(0, total, concurrency):
                    batch = responses[batch_start : batch_start + concurrency]
                    futures = [executor.submit(self._classify_one, raw) for raw in batch]
                    for future in futures:
                        result, ok = future.result()
                        self._store.save_result(result)
                        outcome.results.append(result)
                        if not ok:
                            outcome.failures += 1
                    self._log.info(
                        "classification_batch_done",
                        completed=len(outcome.results),
                        total=total,
                        failures=outcome.failures,
                    )
        except Exception:
            machine.to_failed()
            raise

        machine.to_aggregating()
        outcome.grid = build_grid(outcome.results)
        self._log.info(
            "classification_complete",
            result_count=len(outcome.results),
            failures=outcome.failures,
            prompt_count=len(outcome.grid.prompt_ids),
            model_count=len(outcome.grid.models),
        )

        if self._exporter is not None and outcome.results:
            machine.to_exporting()
            outcome.dashboard_file = self._exporter.export(
                outcome.results, outcome.grid, self._options.dashboard_subdir
            )
        machine.to_done()
        return outcome

    def _classify_one(self, raw: RawResponse) -> tuple[BenchmarkResult, bool]:
        try:
            detector = self._detector_factory(raw.prompt_text)
            analysis = analyze_response(raw.response.content, detector)
        except Exception as e:  # noqa: BLE001
            self._metrics.record_classification(failed=True)
            self._log.warning(
                "classification_failed",
                model_id=raw.model.id,
                prompt_id=raw.prompt_id,
                error=str(e)[:200],
            )
            return raw.with_analysis(failed_analysis()), False

        self._metrics.record_classification()
        detection = analysis.detection
        self._log.info(
            "response_classified",
            model_id=raw.model.id,
            prompt_id=raw.prompt_id,
            ecosystem=detection.ecosystem,
            network=detection.network,
            strength=detection.strength.value,
        )
        return raw.with_analysis(analysis), True
