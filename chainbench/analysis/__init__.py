"""Response analysis: chain detection, behavior and completeness.

The pattern-based detector scores a response against a fixed signal
catalog; the behavior classifier and completeness scorer are independent
heuristics over the same text.
"""

from chainbench.analysis.analyzer import DetectorFn, analyze_response
from chainbench.analysis.behavior import classify_behavior
from chainbench.analysis.completeness import score_completeness
from chainbench.analysis.detector import ChainDetector, SignalTally, detect
from chainbench.analysis.models import (
    AnalysisResult,
    Behavior,
    BehaviorClassification,
    CompletenessScore,
    Detection,
    EvidenceItem,
    Strength,
)
from chainbench.analysis.signals import SIGNALS, TOOL_LABELS, Signal


__all__ = [
    "SIGNALS",
    "TOOL_LABELS",
    "AnalysisResult",
    "Behavior",
    "BehaviorClassification",
    "ChainDetector",
    "CompletenessScore",
    "Detection",
    "DetectorFn",
    "EvidenceItem",
    "Signal",
    "SignalTally",
    "Strength",
    "analyze_response",
    "classify_behavior",
    "detect",
    "score_completeness",
]
