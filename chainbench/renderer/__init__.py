"""Report and dashboard output module."""

from chainbench.renderer.console import format_grid
from chainbench.renderer.csv_renderer import CsvRenderer, generate_csv
from chainbench.renderer.dashboard import DashboardExporter, build_dashboard_run
from chainbench.renderer.io import AtomicWriter
from chainbench.renderer.markdown_renderer import MarkdownRenderer
from chainbench.renderer.models import DashboardRun, GeneratedFile, SlimResult


__all__ = [
    "AtomicWriter",
    "CsvRenderer",
    "DashboardExporter",
    "DashboardRun",
    "GeneratedFile",
    "MarkdownRenderer",
    "SlimResult",
    "build_dashboard_run",
    "format_grid",
    "generate_csv",
]
