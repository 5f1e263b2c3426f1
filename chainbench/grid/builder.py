"""Builds the prompt x model grid from benchmark results."""

from collections import Counter
from collections.abc import Mapping, Sequence

from chainbench.data_model.rounding import round_half_up
from chainbench.grid.models import Grid, GridCell
from chainbench.store.models import BenchmarkResult, ModelConfig


CELL_KEY_SEPARATOR = "::"


def cell_key(prompt_id: str, model_id: str) -> str:
    """Return the grid key for a (prompt, model) pair."""
    return f"{prompt_id}{CELL_KEY_SEPARATOR}{model_id}"


def get_cell(grid: Grid, prompt_id: str, model_id: str) -> GridCell | None:
    """Look up a cell, ``None`` when the pair has no results."""
    return grid.cells.get(cell_key(prompt_id, model_id))


def plurality(counts: Mapping[str, int]) -> str | None:
    """Return the most frequent label; the first inserted wins ties."""
    top_label: str | None = None
    top_count = 0
    for label, count in counts.items():
        if count > top_count:
            top_label = label
            top_count = count
    return top_label


def _aggregate(group: Sequence[BenchmarkResult]) -> GridCell:
    """Aggregate the runs of one (prompt, model) pair."""
    ecosystem_counts = Counter(r.analysis.detection.ecosystem for r in group)
    network_counts = Counter(r.analysis.detection.network for r in group)
    behavior_counts = Counter(r.analysis.behavior.behavior.value for r in group)
    latest = group[-1].analysis.detection
    run_count = len(group)

    return GridCell(
        ecosystem=plurality(ecosystem_counts) or latest.ecosystem,
        network=plurality(network_counts) or latest.network,
        confidence=latest.confidence,
        strength=latest.strength,
        behavior=plurality(behavior_counts) or group[-1].analysis.behavior.behavior,
        completeness=round_half_up(
            sum(r.analysis.completeness.score for r in group) / run_count
        ),
        latency_ms=round_half_up(sum(r.response.latency_ms for r in group) / run_count),
        ecosystem_counts=dict(ecosystem_counts),
        network_counts=dict(network_counts),
        behavior_counts=dict(behavior_counts),
        run_count=run_count,
    )


def build_grid(results: Sequence[BenchmarkResult]) -> Grid:
    """Group results by (prompt, model) and aggregate repeated runs.

    Args:
        results: Complete, fixed snapshot of results. Must not be appended
            to while the grid is being built.

    Returns:
        Grid over the results; empty when ``results`` is empty.
    """
    prompt_ids: dict[str, None] = {}
    models: dict[str, ModelConfig] = {}
    prompt_categories: dict[str, str] = {}
    prompt_texts: dict[str, str] = {}
    groups: dict[str, list[BenchmarkResult]] = {}

    for result in results:
        prompt_ids.setdefault(result.prompt_id, None)
        models[result.model.id] = result.model
        if result.prompt_category:
            prompt_categories.setdefault(result.prompt_id, result.prompt_category)
        if result.prompt_text:
            prompt_texts.setdefault(result.prompt_id, result.prompt_text)
        groups.setdefault(cell_key(result.prompt_id, result.model.id), []).append(result)

    return Grid(
        prompt_ids=tuple(prompt_ids),
        models=tuple(models.values()),
        cells={key: _aggregate(group) for key, group in groups.items()},
        prompt_categories=prompt_categories,
        prompt_texts=prompt_texts,
    )
