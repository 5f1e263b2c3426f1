"""Data models for LLM classification calls."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LlmVote:
    """One classifier call's verdict.

    Attributes:
        network: Normalized network label.
        confidence: Classifier confidence, 0-100.
        reasoning: Short explanation from the classifier.
        mentioned_chains: Every chain the classifier saw discussed.
    """

    network: str
    confidence: float
    reasoning: str
    mentioned_chains: list[str] = field(default_factory=list)
