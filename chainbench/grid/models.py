"""Data models for the prompt x model aggregation grid."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Annotated

from pydantic import Field

from chainbench.analysis.models import Behavior, Strength
from chainbench.data_model.base import CamelModel
from chainbench.store.models import ModelConfig


class GridCell(CamelModel):
    """All runs of one (prompt, model) pair, aggregated.

    Headline labels are the plurality across runs. ``confidence`` and
    ``strength`` come from the last run in the group rather than an
    average: confidence is relative to each run's own evidence, so
    averaging it across runs means nothing.

    Attributes:
        ecosystem: Plurality ecosystem label.
        network: Plurality network label.
        confidence: Confidence of the last run.
        strength: Strength of the last run.
        behavior: Plurality behavior label.
        completeness: Rounded mean completeness score.
        latency_ms: Rounded mean latency.
        ecosystem_counts: Runs per ecosystem label.
        network_counts: Runs per network label.
        behavior_counts: Runs per behavior label.
        run_count: Number of runs; equals the sum of ``ecosystem_counts``.
    """

    ecosystem: str
    network: str
    confidence: Annotated[int, Field(ge=0, le=100)] = 0
    strength: Strength = Strength.IMPLICIT
    behavior: Behavior = Behavior.JUST_BUILT
    completeness: Annotated[int, Field(ge=0, le=100)] = 0
    latency_ms: Annotated[int, Field(ge=0)] = 0
    ecosystem_counts: dict[str, int] = Field(default_factory=dict)
    network_counts: dict[str, int] = Field(default_factory=dict)
    behavior_counts: dict[str, int] = Field(default_factory=dict)
    run_count: Annotated[int, Field(ge=0)] = 0


@dataclass(frozen=True)
class Grid:
    """Prompt x model aggregation of a fixed result set.

    Built once by ``build_grid`` and never updated; classify again and
    rebuild to get new numbers. The mappings are read-only views.

    Attributes:
        prompt_ids: Prompt ids in first-seen order.
        models: Models in first-seen order.
        cells: Cells keyed by ``"<promptId>::<modelId>"``.
        prompt_categories: Category per prompt id.
        prompt_texts: Prompt text per prompt id.
    """

    prompt_ids: tuple[str, ...] = ()
    models: tuple[ModelConfig, ...] = ()
    cells: Mapping[str, GridCell] = field(default_factory=dict)
    prompt_categories: Mapping[str, str] = field(default_factory=dict)
    prompt_texts: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only copies of the builder's dicts
        for name in ("cells", "prompt_categories", "prompt_texts"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def is_empty(self) -> bool:
        """Check if the grid holds no cells."""
        return not self.cells
