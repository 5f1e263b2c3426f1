"""Data models for report and dashboard output."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import Field

from chainbench.data_model.base import CamelModel
from chainbench.grid.models import GridCell


@dataclass(frozen=True)
class GeneratedFile:
    """Information about a generated file.

    Attributes:
        path: Relative path from output directory.
        absolute_path: Absolute path to file.
        bytes_written: Number of bytes written.
        sha256: SHA-256 checksum of content.
    """

    path: str
    absolute_path: str
    bytes_written: int
    sha256: str


class DashboardRunMeta(CamelModel):
    """Header of a dashboard run file."""

    timestamp: str
    run_id: str
    model_count: Annotated[int, Field(ge=0)]
    prompt_count: Annotated[int, Field(ge=0)]
    result_count: Annotated[int, Field(ge=0)]
    web_search: bool = False


class SlimResult(CamelModel):
    """One result flattened for the dashboard.

    Evidence is rendered to display strings.
    """

    prompt_id: str
    prompt_category: str
    model: str
    model_display_name: str
    model_tier: str
    ecosystem: str
    network: str
    strength: str
    confidence: int
    behavior: str
    completeness: int
    latency_ms: int
    tokens_used: int
    evidence: list[str] = Field(default_factory=list)
    web_search: bool = False


class DashboardModel(CamelModel):
    """Model descriptor in the dashboard grid."""

    id: str
    display_name: str
    tier: str
    provider: str


class DashboardGrid(CamelModel):
    """Serialized grid with cells keyed by ``"<promptId>::<modelId>"``."""

    prompt_ids: list[str] = Field(default_factory=list)
    models: list[DashboardModel] = Field(default_factory=list)
    cells: dict[str, GridCell] = Field(default_factory=dict)


class DashboardPrompt(CamelModel):
    """Prompt descriptor in the dashboard payload."""

    id: str
    category: str
    text: str


class DashboardRun(CamelModel):
    """Full payload of ``run-<timestamp>.json`` and ``latest.json``."""

    meta: DashboardRunMeta
    results: list[SlimResult] = Field(default_factory=list)
    grid: DashboardGrid = Field(default_factory=DashboardGrid)
    prompts: list[DashboardPrompt] = Field(default_factory=list)


class RunIndexEntry(CamelModel):
    """One entry of ``runs.json``."""

    timestamp: str
    run_id: str
    filename: str
    model_count: int = 0
    prompt_count: int = 0
    result_count: int = 0
    web_search: bool = False
