"""Markdown report rendered from a Jinja2 template."""

import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog
from jinja2 import Environment, PackageLoader

from chainbench.analysis.constants import get_display_name
from chainbench.data_model.timestamps import iso_timestamp
from chainbench.grid.builder import get_cell
from chainbench.grid.models import Grid
from chainbench.grid.reducers import default_label_summary
from chainbench.renderer.io import AtomicWriter
from chainbench.renderer.models import GeneratedFile
from chainbench.store.models import BenchmarkResult, ModelConfig


logger = structlog.get_logger()

MARKDOWN_FILE = "report.md"
MISSING_CELL = "—"


@dataclass(frozen=True)
class _Row:
    prompt_id: str
    cells: list[str]


@dataclass(frozen=True)
class _ProviderEntry:
    model: ModelConfig
    labels: list[str]


def _result_rows(grid: Grid) -> list[_Row]:
    rows = []
    for prompt_id in grid.prompt_ids:
        cells = []
        for model in grid.models:
            cell = get_cell(grid, prompt_id, model.id)
            if cell is None:
                cells.append(MISSING_CELL)
            else:
                cells.append(
                    f"**{cell.ecosystem}** ({cell.confidence}%) "
                    f"{cell.latency_ms / 1000:.1f}s"
                )
        rows.append(_Row(prompt_id, cells))
    return rows


def _behavior_rows(grid: Grid) -> list[_Row]:
    rows = []
    for prompt_id in grid.prompt_ids:
        cells = []
        for model in grid.models:
            cell = get_cell(grid, prompt_id, model.id)
            if cell is None:
                cells.append(MISSING_CELL)
            else:
                cells.append(f"{cell.behavior.value} (score: {cell.completeness})")
        rows.append(_Row(prompt_id, cells))
    return rows


def _providers(grid: Grid) -> dict[str, list[_ProviderEntry]]:
    grouped: dict[str, list[_ProviderEntry]] = {}
    for model in grid.models:
        labels = []
        for prompt_id in grid.prompt_ids:
            cell = get_cell(grid, prompt_id, model.id)
            if cell is not None:
                labels.append(cell.ecosystem)
        grouped.setdefault(model.provider, []).append(_ProviderEntry(model, labels))
    return grouped


class MarkdownRenderer:
    """Writes ``report.md`` summarizing a grid."""

    def __init__(self, output_dir: Path) -> None:
        """Initialize the renderer.

        Args:
            output_dir: Directory receiving ``report.md``.
        """
        self._output_dir = output_dir
        self._writer = AtomicWriter(output_dir)
        self._log = logger.bind(component="renderer", subcomponent="markdown")
        self._env = Environment(
            loader=PackageLoader("chainbench.renderer", "templates"),
            autoescape=False,  # noqa: S701
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["display_name"] = get_display_name

    def generate(
        self,
        grid: Grid,
        results: Sequence[BenchmarkResult],
        generated_at: str | None = None,
    ) -> str:
        """Render the report text.

        Args:
            grid: Aggregated grid.
            results: Results the grid was built from.
            generated_at: Timestamp shown in the header (defaults to now).

        Returns:
            Markdown text.
        """
        template = self._env.get_template("report.md.j2")
        return template.render(
            generated_at=generated_at or iso_timestamp(),
            total_results=len(results),
            model_headers=[f"{m.display_name} ({m.tier.value})" for m in grid.models],
            separators=" | ".join("---" for _ in grid.models),
            result_rows=_result_rows(grid),
            behavior_rows=_behavior_rows(grid),
            summaries=[s for s in default_label_summary(grid) if s.count > 0],
            providers=_providers(grid),
        )

    def render(self, grid: Grid, results: Sequence[BenchmarkResult]) -> GeneratedFile:
        """Write the Markdown report."""
        start_time = time.perf_counter()
        generated = self._writer.write(
            self._output_dir / MARKDOWN_FILE, self.generate(grid, results)
        )
        self._log.info(
            "markdown_report_written",
            path=generated.path,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return generated
