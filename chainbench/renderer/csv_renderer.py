"""CSV report of every benchmark result."""

import csv
import io
from collections.abc import Sequence
from pathlib import Path

import structlog

from chainbench.renderer.io import AtomicWriter
from chainbench.renderer.models import GeneratedFile
from chainbench.store.models import BenchmarkResult


logger = structlog.get_logger()

CSV_FILE = "report.csv"

COLUMNS: tuple[str, ...] = (
    "prompt_id",
    "model_id",
    "model_name",
    "model_tier",
    "provider",
    "network",
    "ecosystem",
    "confidence",
    "evidence",
    "behavior",
    "questions_asked",
    "completeness_score",
    "has_contract",
    "has_deploy_script",
    "has_frontend",
    "has_tests",
    "todo_count",
    "latency_ms",
    "latency_s",
    "tokens_used",
    "timestamp",
    "run_id",
)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def result_row(result: BenchmarkResult) -> list[str]:
    """Flatten one result into CSV fields in column order."""
    detection = result.analysis.detection
    behavior = result.analysis.behavior
    completeness = result.analysis.completeness
    return [
        result.prompt_id,
        result.model.id,
        result.model.display_name,
        result.model.tier.value,
        result.model.provider,
        detection.network,
        detection.ecosystem,
        str(detection.confidence),
        "; ".join(detection.rendered_evidence()),
        behavior.behavior.value,
        str(behavior.questions_asked),
        str(completeness.score),
        _flag(completeness.has_contract),
        _flag(completeness.has_deploy_script),
        _flag(completeness.has_frontend),
        _flag(completeness.has_tests),
        str(completeness.todo_count),
        str(result.response.latency_ms),
        f"{result.response.latency_ms / 1000:.1f}",
        str(result.response.tokens_used),
        result.timestamp,
        result.run_id,
    ]


def generate_csv(results: Sequence[BenchmarkResult]) -> str:
    """Render results as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(COLUMNS)
    for result in results:
        writer.writerow(result_row(result))
    return buffer.getvalue()


class CsvRenderer:
    """Writes ``report.csv`` into a run directory."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir
        self._writer = AtomicWriter(output_dir)
        self._log = logger.bind(component="renderer", subcomponent="csv")

    def render(self, results: Sequence[BenchmarkResult]) -> GeneratedFile:
        """Write the CSV report."""
        generated = self._writer.write(self._output_dir / CSV_FILE, generate_csv(results))
        self._log.info("csv_report_written", path=generated.path, rows=len(results))
        return generated
