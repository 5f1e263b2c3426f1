"""Grid aggregation and comparison reducers."""

from chainbench.grid.builder import build_grid, cell_key, get_cell, plurality
from chainbench.grid.models import Grid, GridCell
from chainbench.grid.reducers import (
    LEGACY_CATEGORY_RENAMES,
    ComparisonRow,
    DefaultLabelSummary,
    compare_result_sets,
    compute_comparison,
    default_label_summary,
    latency_per_model,
    overall_distribution,
    per_category_distribution,
    per_model_distribution,
    per_prompt_labels,
    result_distribution,
    tool_frequency,
)


__all__ = [
    "LEGACY_CATEGORY_RENAMES",
    "ComparisonRow",
    "DefaultLabelSummary",
    "Grid",
    "GridCell",
    "build_grid",
    "cell_key",
    "compare_result_sets",
    "compute_comparison",
    "default_label_summary",
    "get_cell",
    "latency_per_model",
    "overall_distribution",
    "per_category_distribution",
    "per_model_distribution",
    "per_prompt_labels",
    "plurality",
    "result_distribution",
    "tool_frequency",
]
