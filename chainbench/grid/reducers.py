"""Comparison and export reducers over grids and result sets.

Pure functions: no I/O and no hidden state. Empty input always yields an
empty structure rather than an error, so "no data" renders as-is.
"""

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from chainbench.analysis.constants import UNKNOWN_LABEL
from chainbench.analysis.signals import TOOL_LABELS
from chainbench.data_model.rounding import round_half_up
from chainbench.grid.builder import get_cell, plurality
from chainbench.grid.models import Grid, GridCell
from chainbench.store.models import BenchmarkResult, ModelConfig


CountField = Literal["ecosystem", "network", "behavior"]
ResultField = Literal["ecosystem", "network", "tools"]

# Placeholder network written by older exports that lacked network data
NETWORK_PLACEHOLDER = "N/A"

# Categories renamed after the first benchmark runs were published
LEGACY_CATEGORY_RENAMES: dict[str, str] = {
    "Advisory": "Recommendation",
    "Identity": "Registry",
}


@dataclass(frozen=True)
class DefaultLabelSummary:
    """What a model defaults to across all prompts.

    Attributes:
        model: The model.
        label: Plurality headline label over the model's cells.
        count: Number of prompts whose headline is ``label``.
        total: Number of prompts in the grid.
    """

    model: ModelConfig
    label: str
    count: int
    total: int

    @property
    def times_chosen(self) -> str:
        """Display string such as ``7/12``."""
        return f"{self.count}/{self.total}"

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "model": self.model.id,
            "displayName": self.model.display_name,
            "tier": self.model.tier.value,
            "label": self.label,
            "timesChosen": self.times_chosen,
        }


@dataclass(frozen=True)
class ComparisonRow:
    """Share of one label in a base and an alternate result set.

    Attributes:
        label: Compared label.
        base_count: Occurrences in the base set.
        web_count: Occurrences in the alternate set.
        base_pct: Share of the base set, in percent.
        web_pct: Share of the alternate set, in percent.
        delta_pp: ``web_pct - base_pct`` in percentage points.
    """

    label: str
    base_count: int
    web_count: int
    base_pct: float
    web_pct: float
    delta_pp: float

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "label": self.label,
            "baseCount": self.base_count,
            "webCount": self.web_count,
            "basePct": self.base_pct,
            "webPct": self.web_pct,
            "deltaPp": self.delta_pp,
        }


def resolve_category(category: str) -> str:
    """Map a legacy category name to its current name."""
    return LEGACY_CATEGORY_RENAMES.get(category, category)


def _cell_counts(cell: GridCell, field: CountField) -> dict[str, int]:
    if field == "ecosystem":
        return cell.ecosystem_counts
    if field == "network":
        return {
            label: count
            for label, count in cell.network_counts.items()
            if label != NETWORK_PLACEHOLDER
        }
    return cell.behavior_counts


def _cell_headline(cell: GridCell, field: CountField) -> str:
    if field == "ecosystem":
        return cell.ecosystem
    if field == "network":
        return cell.network
    return cell.behavior.value


def _add_counts(target: dict[str, int], counts: Mapping[str, int]) -> None:
    for label, count in counts.items():
        target[label] = target.get(label, 0) + count


def _model_cells(
    grid: Grid, model: ModelConfig, prompt_ids: Iterable[str]
) -> list[GridCell]:
    cells = []
    for prompt_id in prompt_ids:
        cell = get_cell(grid, prompt_id, model.id)
        if cell is not None:
            cells.append(cell)
    return cells


def overall_distribution(grid: Grid, field: CountField = "ecosystem") -> dict[str, int]:
    """Sum a count map over every cell of the grid.

    Args:
        grid: Aggregated grid.
        field: Which count map to sum.

    Returns:
        Run count per label.
    """
    totals: dict[str, int] = {}
    for cell in grid.cells.values():
        _add_counts(totals, _cell_counts(cell, field))
    return totals


def per_model_distribution(
    grid: Grid, field: CountField = "ecosystem"
) -> list[tuple[ModelConfig, dict[str, int]]]:
    """Sum a count map per model, in grid model order.

    Args:
        grid: Aggregated grid.
        field: Which count map to sum.

    Returns:
        One ``(model, counts)`` pair per model.
    """
    rows = []
    for model in grid.models:
        totals: dict[str, int] = {}
        for cell in _model_cells(grid, model, grid.prompt_ids):
            _add_counts(totals, _cell_counts(cell, field))
        rows.append((model, totals))
    return rows


def per_category_distribution(
    grid: Grid, field: CountField = "ecosystem"
) -> dict[str, dict[str, dict[str, int]]]:
    """Sum a count map per prompt category and model.

    Legacy category names are renamed first so that old and new runs
    group together.

    Args:
        grid: Aggregated grid.
        field: Which count map to sum.

    Returns:
        ``{category: {model_id: {label: count}}}`` in first-seen order.
    """
    prompts_by_category: dict[str, list[str]] = {}
    for prompt_id in grid.prompt_ids:
        category = resolve_category(grid.prompt_categories.get(prompt_id, UNKNOWN_LABEL))
        prompts_by_category.setdefault(category, []).append(prompt_id)

    breakdown: dict[str, dict[str, dict[str, int]]] = {}
    for category, prompt_ids in prompts_by_category.items():
        per_model: dict[str, dict[str, int]] = {}
        for model in grid.models:
            totals: dict[str, int] = {}
            for cell in _model_cells(grid, model, prompt_ids):
                _add_counts(totals, _cell_counts(cell, field))
            per_model[model.id] = totals
        breakdown[category] = per_model
    return breakdown


def per_prompt_labels(
    grid: Grid, field: CountField = "ecosystem"
) -> dict[str, dict[str, str]]:
    """Return the headline label of every cell, by prompt then model."""
    labels: dict[str, dict[str, str]] = {}
    for prompt_id in grid.prompt_ids:
        row: dict[str, str] = {}
        for model in grid.models:
            cell = get_cell(grid, prompt_id, model.id)
            if cell is not None:
                row[model.id] = _cell_headline(cell, field)
        labels[prompt_id] = row
    return labels


def default_label_summary(
    grid: Grid, field: CountField = "ecosystem"
) -> list[DefaultLabelSummary]:
    """Find the label each model picks most often across prompts.

    Each prompt counts once, using the cell's headline label.

    Args:
        grid: Aggregated grid.
        field: Which headline label to use.

    Returns:
        One summary per model; ``Unknown`` with count 0 for models
        without cells.
    """
    total = len(grid.prompt_ids)
    summaries = []
    for model in grid.models:
        headlines = Counter(
            _cell_headline(cell, field)
            for cell in _model_cells(grid, model, grid.prompt_ids)
        )
        label = plurality(headlines)
        summaries.append(
            DefaultLabelSummary(
                model=model,
                label=label or UNKNOWN_LABEL,
                count=headlines[label] if label else 0,
                total=total,
            )
        )
    return summaries


def latency_per_model(grid: Grid) -> list[tuple[ModelConfig, int]]:
    """Mean of cell latencies per model, rounded to whole milliseconds."""
    rows = []
    for model in grid.models:
        cells = _model_cells(grid, model, grid.prompt_ids)
        average = (
            round_half_up(sum(c.latency_ms for c in cells) / len(cells)) if cells else 0
        )
        rows.append((model, average))
    return rows


def tool_frequency(results: Iterable[BenchmarkResult]) -> dict[str, int]:
    """Count results whose winning evidence names each developer tool.

    A tool counts once per result regardless of how often it matched.

    Args:
        results: Classified results.

    Returns:
        Result count per tool label, most frequent first.
    """
    counts: Counter[str] = Counter()
    for result in results:
        labels = {item.label for item in result.analysis.detection.evidence}
        counts.update(label for label in labels if label in TOOL_LABELS)
    return dict(counts.most_common())


def result_distribution(
    results: Iterable[BenchmarkResult], field: ResultField = "ecosystem"
) -> dict[str, int]:
    """Count labels over a flat result list.

    Args:
        results: Classified results.
        field: ``ecosystem``, ``network`` or ``tools``.

    Returns:
        Count per label in first-seen order.
    """
    results = list(results)
    if field == "tools":
        return tool_frequency(results)
    counts: dict[str, int] = {}
    for result in results:
        detection = result.analysis.detection
        label = detection.ecosystem if field == "ecosystem" else detection.network
        counts[label] = counts.get(label, 0) + 1
    return counts


def _share(count: int, total: int) -> float:
    return count / total * 100 if total else 0.0


def compute_comparison(
    base_counts: Mapping[str, int], web_counts: Mapping[str, int]
) -> list[ComparisonRow]:
    """Compare label shares between a base and an alternate result set.

    Shares are normalized per set, so sets of different sizes compare
    fairly; the delta is in percentage points, not counts.

    Args:
        base_counts: Count per label in the base set.
        web_counts: Count per label in the alternate set.

    Returns:
        Rows sorted by absolute delta, largest first; ties keep base
        labels first, then labels new in the alternate set.
    """
    base_total = sum(base_counts.values())
    web_total = sum(web_counts.values())
    labels = list(dict.fromkeys([*base_counts, *web_counts]))

    rows = []
    for label in labels:
        base_count = base_counts.get(label, 0)
        web_count = web_counts.get(label, 0)
        base_pct = _share(base_count, base_total)
        web_pct = _share(web_count, web_total)
        rows.append(
            ComparisonRow(
                label=label,
                base_count=base_count,
                web_count=web_count,
                base_pct=base_pct,
                web_pct=web_pct,
                delta_pp=web_pct - base_pct,
            )
        )
    return sorted(rows, key=lambda row: -abs(row.delta_pp))


def compare_result_sets(
    base_results: Sequence[BenchmarkResult],
    web_results: Sequence[BenchmarkResult],
    field: ResultField = "ecosystem",
) -> list[ComparisonRow]:
    """Compare two flat result sets, e.g. standard versus web search.

    Args:
        base_results: Results of the base mode.
        web_results: Results of the alternate mode.
        field: ``ecosystem``, ``network`` or ``tools``.

    Returns:
        Comparison rows, largest shift first.
    """
    return compute_comparison(
        result_distribution(base_results, field),
        result_distribution(web_results, field),
    )
