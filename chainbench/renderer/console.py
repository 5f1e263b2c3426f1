"""Plain-text grid for terminal output."""

from collections import Counter

from chainbench.analysis.constants import get_display_name
from chainbench.grid.builder import get_cell
from chainbench.grid.models import Grid
from chainbench.grid.reducers import default_label_summary


PROMPT_COL_WIDTH = 18
CELL_WIDTH = 22
LABEL_WIDTH = 10


def _pad(text: str, width: int) -> str:
    return text[:width].ljust(width)


def format_grid(grid: Grid) -> list[str]:
    """Format the grid as terminal lines.

    Each cell shows the ecosystem, the confidence and the mean latency.
    A DEFAULT CHAIN row and a per-model behavior summary follow.
    """
    header = (
        _pad("Prompt", PROMPT_COL_WIDTH)
        + " | "
        + " | ".join(_pad(m.display_name, CELL_WIDTH) for m in grid.models)
    )
    separator = "-" * len(header)

    lines = ["", separator, "  CHAIN BIAS BENCHMARK RESULTS", separator, header, separator]
    for prompt_id in grid.prompt_ids:
        cells = []
        for model in grid.models:
            cell = get_cell(grid, prompt_id, model.id)
            if cell is None:
                cells.append(_pad("—", CELL_WIDTH))
                continue
            text = (
                f"{cell.ecosystem[:LABEL_WIDTH]} {cell.confidence}% "
                f"{cell.latency_ms / 1000:.1f}s"
            )
            cells.append(_pad(text, CELL_WIDTH))
        lines.append(_pad(prompt_id, PROMPT_COL_WIDTH) + " | " + " | ".join(cells))
    lines.append(separator)

    summary_cells = []
    for summary in default_label_summary(grid):
        if summary.count == 0:
            summary_cells.append(_pad("—", CELL_WIDTH))
        else:
            summary_cells.append(
                _pad(
                    f"{get_display_name(summary.label)} ({summary.times_chosen})",
                    CELL_WIDTH,
                )
            )
    lines.append(
        _pad("DEFAULT CHAIN", PROMPT_COL_WIDTH) + " | " + " | ".join(summary_cells)
    )
    lines.append(separator)

    lines.extend(["", "Behavior Summary:"])
    for model in grid.models:
        behaviors: Counter[str] = Counter()
        for prompt_id in grid.prompt_ids:
            cell = get_cell(grid, prompt_id, model.id)
            if cell is not None:
                behaviors[cell.behavior.value] += 1
        counts = ", ".join(f"{label}: {count}" for label, count in behaviors.items())
        lines.append(f"  {model.display_name}: {counts}")
    lines.append("")
    return lines
