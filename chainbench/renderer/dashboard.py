"""Dashboard data export.

Writes one JSON file per export plus ``latest.json`` and a ``runs.json``
index consumed by the dashboard UI.
"""

import json
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

import structlog
from pydantic import ValidationError

from chainbench.analysis.constants import UNKNOWN_LABEL
from chainbench.data_model.timestamps import iso_timestamp, safe_timestamp, utc_now
from chainbench.grid.models import Grid
from chainbench.renderer.io import AtomicWriter
from chainbench.renderer.models import (
    DashboardGrid,
    DashboardModel,
    DashboardPrompt,
    DashboardRun,
    DashboardRunMeta,
    GeneratedFile,
    RunIndexEntry,
    SlimResult,
)
from chainbench.store.models import BenchmarkResult


logger = structlog.get_logger()

LATEST_FILE = "latest.json"
RUNS_INDEX_FILE = "runs.json"


def to_slim_result(result: BenchmarkResult) -> SlimResult:
    """Flatten a benchmark result for the dashboard."""
    detection = result.analysis.detection
    return SlimResult(
        prompt_id=result.prompt_id,
        prompt_category=result.prompt_category,
        model=result.model.id,
        model_display_name=result.model.display_name,
        model_tier=result.model.tier.value,
        ecosystem=detection.ecosystem,
        network=detection.network,
        strength=detection.strength.value,
        confidence=detection.confidence,
        behavior=result.analysis.behavior.behavior.value,
        completeness=result.analysis.completeness.score,
        latency_ms=result.response.latency_ms,
        tokens_used=result.response.tokens_used,
        evidence=detection.rendered_evidence(),
        web_search=result.web_search,
    )


def serialize_grid(grid: Grid) -> DashboardGrid:
    """Convert a grid to its dashboard form."""
    return DashboardGrid(
        prompt_ids=list(grid.prompt_ids),
        models=[
            DashboardModel(
                id=m.id,
                display_name=m.display_name,
                tier=m.tier.value,
                provider=m.provider,
            )
            for m in grid.models
        ],
        cells=dict(grid.cells),
    )


def build_dashboard_run(
    results: Sequence[BenchmarkResult],
    grid: Grid,
    timestamp: str,
    run_id: str,
) -> DashboardRun:
    """Assemble the dashboard payload for a result set."""
    return DashboardRun(
        meta=DashboardRunMeta(
            timestamp=timestamp,
            run_id=run_id,
            model_count=len(grid.models),
            prompt_count=len(grid.prompt_ids),
            result_count=len(results),
            web_search=any(r.web_search for r in results),
        ),
        results=[to_slim_result(r) for r in results],
        grid=serialize_grid(grid),
        prompts=[
            DashboardPrompt(
                id=prompt_id,
                category=grid.prompt_categories.get(prompt_id) or UNKNOWN_LABEL,
                text=grid.prompt_texts.get(prompt_id, ""),
            )
            for prompt_id in grid.prompt_ids
        ],
    )


class DashboardExporter:
    """Exports result sets to the dashboard data directory."""

    def __init__(
        self,
        dashboard_dir: Path,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the exporter.

        Args:
            dashboard_dir: Root data directory of the dashboard.
            clock: Source of the export timestamp.
        """
        self._dashboard_dir = dashboard_dir
        self._clock = clock
        self._log = logger.bind(component="renderer", subcomponent="dashboard")

    def export(
        self,
        results: Sequence[BenchmarkResult],
        grid: Grid,
        subdir: str | None = None,
    ) -> GeneratedFile:
        """Write the run file, ``latest.json`` and the updated index.

        Args:
            results: Results the grid was built from.
            grid: Aggregated grid.
            subdir: Optional subdirectory, e.g. ``chains``.

        Returns:
            The written run file.
        """
        target_dir = self._dashboard_dir / subdir if subdir else self._dashboard_dir
        writer = AtomicWriter(target_dir)

        now = self._clock()
        timestamp = iso_timestamp(now)
        run_id = results[0].run_id if results else safe_timestamp(now)
        filename = f"run-{safe_timestamp(now)}.json"

        payload = build_dashboard_run(results, grid, timestamp, run_id).to_json_dict()
        run_file = writer.write_json(target_dir / filename, payload)
        writer.write_json(target_dir / LATEST_FILE, payload)

        entry = RunIndexEntry(
            timestamp=timestamp,
            run_id=run_id,
            filename=filename,
            model_count=len(grid.models),
            prompt_count=len(grid.prompt_ids),
            result_count=len(results),
            web_search=any(r.web_search for r in results),
        )
        index = [*self.load_index(target_dir), entry.to_json_dict()]
        index.sort(key=lambda e: str(e.get("timestamp", "")), reverse=True)
        writer.write_json(target_dir / RUNS_INDEX_FILE, index)

        self._log.info(
            "dashboard_exported",
            path=run_file.absolute_path,
            run_id=run_id,
            result_count=len(results),
            index_size=len(index),
        )
        return run_file

    def load_index(self, target_dir: Path) -> list[dict[str, object]]:
        """Read ``runs.json``; a missing or corrupt index reads as empty."""
        index_path = target_dir / RUNS_INDEX_FILE
        if not index_path.exists():
            return []
        try:
            data = json.loads(index_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            self._log.warning("runs_index_corrupt", path=str(index_path), error=str(e))
            return []
        if not isinstance(data, list):
            self._log.warning("runs_index_corrupt", path=str(index_path), error="not a list")
            return []

        entries: list[dict[str, object]] = []
        for item in data:
            try:
                entries.append(RunIndexEntry.model_validate(item).to_json_dict())
            except ValidationError:
                self._log.warning("runs_index_entry_skipped", path=str(index_path))
        return entries
