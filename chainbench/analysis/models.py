"""Data models for per-response analysis."""

from enum import Enum
from typing import Annotated

from pydantic import Field, field_validator

from chainbench.data_model.base import CamelModel


class Strength(str, Enum):
    """How directly the winning label was identified.

    - STRONG: an explicit identifier for the winner fired
    - WEAK: only softer label-specific mentions fired
    - IMPLICIT: the winner rests on generic family signals alone
    """

    STRONG = "strong"
    WEAK = "weak"
    IMPLICIT = "implicit"


class Behavior(str, Enum):
    """How a model responded to an open-ended build request."""

    ASKED_QUESTIONS = "asked-questions"
    JUST_BUILT = "just-built"
    MIXED = "mixed"


class EvidenceItem(CamelModel):
    """One signal that contributed to a detection.

    Attributes:
        label: Signal label, or free text for external classifiers.
        match_count: Raw number of matches (before the per-signal cap).
        weight: Points per counted match. Zero for free-text evidence.
        generic: True when the signal is shared by the EVM family.
    """

    label: Annotated[str, Field(min_length=1)]
    match_count: Annotated[int, Field(ge=0)] = 0
    weight: Annotated[int, Field(ge=0)] = 0
    generic: bool = False

    def render(self) -> str:
        """Format the evidence for humans, e.g. ``Hardhat (×2, weight 7)``."""
        if self.weight == 0:
            return self.label
        return f"{self.label} (×{self.match_count}, weight {self.weight})"


class Detection(CamelModel):
    """Network classification of a single response.

    Attributes:
        network: Most specific label found (e.g. "Base", "Solana").
        ecosystem: Coarse grouping of the network.
        confidence: Share of the total score held by the winner, 0-100.
        strength: Tier describing which signal classes fired.
        evidence: Signals supporting the winner.
        scores: Score per label in rank order (serialized as ``all``).
        reasoning: Explanation from an external classifier, if any.
    """

    network: str
    ecosystem: str
    confidence: Annotated[int, Field(ge=0, le=100)] = 0
    strength: Strength = Strength.IMPLICIT
    evidence: list[EvidenceItem] = Field(default_factory=list)
    scores: dict[str, int] = Field(default_factory=dict, alias="all")
    reasoning: str | None = None

    @field_validator("evidence", mode="before")
    @classmethod
    def wrap_text_evidence(cls, value: object) -> object:
        """Accept plain strings as free-text evidence."""
        if isinstance(value, list):
            return [{"label": v} if isinstance(v, str) else v for v in value]
        return value

    def rendered_evidence(self) -> list[str]:
        """Return the evidence as display strings."""
        return [item.render() for item in self.evidence]


class BehaviorClassification(CamelModel):
    """Whether a response asked clarifying questions or just built."""

    behavior: Behavior
    questions_asked: Annotated[int, Field(ge=0)] = 0
    decisions_stated: list[str] = Field(default_factory=list)


class CompletenessScore(CamelModel):
    """Additive 0-100 completeness score with its contributing flags."""

    score: Annotated[int, Field(ge=0, le=100)]
    has_contract: bool = False
    has_deploy_script: bool = False
    has_frontend: bool = False
    has_tests: bool = False
    todo_count: Annotated[int, Field(ge=0)] = 0


class AnalysisResult(CamelModel):
    """Full classification bundle for one response.

    Never mutated; reclassification produces a new instance.
    """

    detection: Detection
    behavior: BehaviorClassification
    completeness: CompletenessScore
