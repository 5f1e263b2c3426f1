"""Persisted records for prompts, responses and benchmark results."""

from enum import Enum
from typing import Annotated

from pydantic import Field

from chainbench.analysis.models import AnalysisResult
from chainbench.data_model.base import CamelModel


class ModelTier(str, Enum):
    """Pricing tier of a benchmarked model."""

    FLAGSHIP = "flagship"
    MID_TIER = "mid-tier"


class Prompt(CamelModel):
    """A chain-agnostic build request sent to every model."""

    id: Annotated[str, Field(min_length=1)]
    text: str
    category: str = ""


class ModelConfig(CamelModel):
    """Identifies the model that produced a response."""

    id: Annotated[str, Field(min_length=1)]
    provider: str
    tier: ModelTier = ModelTier.FLAGSHIP
    display_name: str = ""


class ProviderResponse(CamelModel):
    """Output of one provider API call.

    Attributes:
        content: Raw response text to classify.
        model: Model identifier used for the call.
        provider: Provider name.
        tokens_used: Input plus output tokens.
        latency_ms: Wall-clock duration of the call.
    """

    content: str
    model: str
    provider: str
    tokens_used: Annotated[int, Field(ge=0)] = 0
    latency_ms: Annotated[int, Field(ge=0)] = 0


class RawResponse(CamelModel):
    """A collected response that has not been classified yet."""

    prompt_id: Annotated[str, Field(min_length=1)]
    prompt_text: str = ""
    prompt_category: str = ""
    model: ModelConfig
    response: ProviderResponse
    timestamp: str
    run_id: str
    web_search: bool = False

    def with_analysis(self, analysis: AnalysisResult) -> "BenchmarkResult":
        """Attach an analysis, producing a benchmark result.

        An existing analysis is replaced, so results can be reclassified.
        """
        fields = {name: getattr(self, name) for name in RawResponse.model_fields}
        return BenchmarkResult(**fields, analysis=analysis)


class BenchmarkResult(RawResponse):
    """One classified (prompt, model, run, mode) row.

    The unit of persistence and the input to grid aggregation.
    """

    analysis: AnalysisResult

    def to_raw(self) -> RawResponse:
        """Drop the analysis, keeping the collected response."""
        fields = dict(self)
        fields.pop("analysis")
        return RawResponse(**fields)
