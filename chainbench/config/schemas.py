"""Pydantic schemas for benchmark configuration files."""

from typing import Annotated, Literal

from pydantic import Field, model_validator

from chainbench.config.constants import ID_PATTERN
from chainbench.data_model.base import StrictBaseModel
from chainbench.store.models import ModelConfig, ModelTier, Prompt


class PromptConfig(StrictBaseModel):
    """A prompt entry in benchmark.yaml.

    Attributes:
        id: Unique prompt identifier.
        text: Prompt text sent verbatim to every model.
        category: Grouping used by per-category breakdowns.
    """

    id: Annotated[str, Field(min_length=1, max_length=100, pattern=ID_PATTERN)]
    text: Annotated[str, Field(min_length=1)]
    category: Annotated[str, Field(max_length=50)] = ""

    def to_prompt(self) -> Prompt:
        """Convert to the runtime prompt record."""
        return Prompt(id=self.id, text=self.text, category=self.category)


class ModelEntry(StrictBaseModel):
    """A model entry in benchmark.yaml.

    Attributes:
        id: Provider-side model identifier.
        provider: Provider that serves the model.
        tier: Pricing tier.
        display_name: Human-readable name for reports.
    """

    id: Annotated[str, Field(min_length=1, max_length=100, pattern=ID_PATTERN)]
    provider: Literal["anthropic", "openai", "google"]
    tier: ModelTier = ModelTier.FLAGSHIP
    display_name: str = ""

    def to_model_config(self) -> ModelConfig:
        """Convert to the runtime model record."""
        return ModelConfig(
            id=self.id,
            provider=self.provider,
            tier=self.tier,
            display_name=self.display_name or self.id,
        )


class BenchmarkConfig(StrictBaseModel):
    """Root configuration for benchmark.yaml.

    Attributes:
        version: Schema version.
        prompts: Prompts to send.
        models: Models to benchmark.
    """

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    prompts: Annotated[list[PromptConfig], Field(min_length=1)]
    models: Annotated[list[ModelEntry], Field(min_length=1)]

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "BenchmarkConfig":
        """Ensure prompt ids and model ids are unique."""
        for kind, ids in (
            ("prompt", [p.id for p in self.prompts]),
            ("model", [m.id for m in self.models]),
        ):
            seen: set[str] = set()
            for item_id in ids:
                if item_id in seen:
                    msg = f"Duplicate {kind} id: {item_id}"
                    raise ValueError(msg)
                seen.add(item_id)
        return self

    def to_prompts(self) -> list[Prompt]:
        """Runtime prompt records in file order."""
        return [p.to_prompt() for p in self.prompts]

    def to_model_configs(self) -> list[ModelConfig]:
        """Runtime model records in file order."""
        return [m.to_model_config() for m in self.models]
