"""Signal-weighted chain detector.

Scores a response against the signal catalog and names the network it
leans towards. Pure and deterministic: the same text always yields the
same Detection, and no input string raises.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from chainbench.analysis.constants import (
    EVM_NETWORKS,
    MAX_CONTESTED_CONFIDENCE,
    MAX_COUNTED_MATCHES,
    STRONG_SIGNAL_WEIGHT,
    UNKNOWN_LABEL,
    UNSPECIFIED_NETWORK,
    get_ecosystem,
)
from chainbench.analysis.models import Detection, EvidenceItem, Strength
from chainbench.analysis.signals import SIGNALS, Signal
from chainbench.data_model.rounding import round_half_up


@dataclass(frozen=True)
class SignalTally:
    """Scores accumulated before generic-signal resolution.

    Attributes:
        scores: Label-specific score per network, in first-seen order.
        evidence: Label-specific evidence per network.
        generic_score: Total score of EVM-generic signals.
        generic_evidence: Evidence for the generic signals.
    """

    scores: dict[str, int] = field(default_factory=dict)
    evidence: dict[str, list[EvidenceItem]] = field(default_factory=dict)
    generic_score: int = 0
    generic_evidence: list[EvidenceItem] = field(default_factory=list)


def _classify_strength(evidence: Sequence[EvidenceItem]) -> Strength:
    """Pick the strength tier from the winner's evidence."""
    specific = [item for item in evidence if not item.generic]
    if not specific:
        return Strength.IMPLICIT
    if any(item.weight >= STRONG_SIGNAL_WEIGHT for item in specific):
        return Strength.STRONG
    return Strength.WEAK


def _top_evm_network(scores: dict[str, int]) -> str | None:
    """Return the highest-scoring EVM network; the first seen wins ties."""
    leader: str | None = None
    leader_score = 0
    for network, score in scores.items():
        if network in EVM_NETWORKS and score > leader_score:
            leader = network
            leader_score = score
    return leader


class ChainDetector:
    """Detects the blockchain network a response favors.

    Scoring:
        score[network] = sum(weight * min(matches, 3)) over its signals

    EVM-generic signals (Hardhat, ``pragma solidity``, ...) are held back
    and added to the EVM network that already leads. When no EVM network
    was named they are filed under ``Unspecified`` instead of guessing.
    """

    def __init__(self, signals: Sequence[Signal] = SIGNALS) -> None:
        """Initialize the detector and pre-compile the catalog.

        Args:
            signals: Signal catalog to score against.
        """
        self._signals = [
            (signal, re.compile(signal.pattern, re.IGNORECASE)) for signal in signals
        ]

    def __call__(self, text: str) -> Detection:
        """Alias for ``detect`` so the detector can be passed as a callable."""
        return self.detect(text)

    def detect(self, text: str) -> Detection:
        """Classify a response.

        Args:
            text: Raw response text.

        Returns:
            Detection for the winning network, or an ``Unknown`` detection
            with empty evidence when no signal fired.
        """
        return self.resolve(self.tally(text))

    def tally(self, text: str) -> SignalTally:
        """Count signal matches without resolving generic signals.

        Args:
            text: Raw response text.

        Returns:
            SignalTally with label-specific and generic buckets.
        """
        scores: dict[str, int] = {}
        evidence: dict[str, list[EvidenceItem]] = {}
        generic_score = 0
        generic_evidence: list[EvidenceItem] = []

        for signal, pattern in self._signals:
            match_count = sum(1 for _ in pattern.finditer(text))
            if match_count == 0:
                continue

            score = signal.weight * min(match_count, MAX_COUNTED_MATCHES)
            item = EvidenceItem(
                label=signal.label,
                match_count=match_count,
                weight=signal.weight,
                generic=signal.is_generic,
            )

            if signal.is_generic:
                generic_score += score
                generic_evidence.append(item)
            else:
                scores[signal.network] = scores.get(signal.network, 0) + score
                evidence.setdefault(signal.network, []).append(item)

        return SignalTally(
            scores=scores,
            evidence=evidence,
            generic_score=generic_score,
            generic_evidence=generic_evidence,
        )

    def resolve(self, tally: SignalTally) -> Detection:
        """Fold generic signals into a network and rank the labels.

        Args:
            tally: Pre-resolution scores from ``tally``.

        Returns:
            Detection for the top-ranked label.
        """
        scores = dict(tally.scores)
        evidence = {network: list(items) for network, items in tally.evidence.items()}

        if tally.generic_score > 0:
            target = _top_evm_network(scores) or UNSPECIFIED_NETWORK
            scores[target] = scores.get(target, 0) + tally.generic_score
            evidence.setdefault(target, []).extend(tally.generic_evidence)

        if not scores:
            return Detection(
                network=UNKNOWN_LABEL,
                ecosystem=UNKNOWN_LABEL,
                confidence=0,
                strength=Strength.IMPLICIT,
            )

        # sorted() is stable, so equal scores keep first-seen order
        ranked = sorted(scores.items(), key=lambda entry: -entry[1])
        top_network, top_score = ranked[0]
        total = sum(scores.values())
        winner_evidence = evidence.get(top_network, [])
        confidence = round_half_up(top_score / total * 100)
        if len(ranked) > 1:
            # 100 is reserved for a single scoring label
            confidence = min(confidence, MAX_CONTESTED_CONFIDENCE)

        return Detection(
            network=top_network,
            ecosystem=get_ecosystem(top_network),
            confidence=confidence,
            strength=_classify_strength(winner_evidence),
            evidence=winner_evidence,
            scores=dict(ranked),
        )


_default_detector = ChainDetector()


def detect(text: str) -> Detection:
    """Classify a response with the built-in signal catalog.

    Args:
        text: Raw response text.

    Returns:
        Detection for the winning network.
    """
    return _default_detector.detect(text)
