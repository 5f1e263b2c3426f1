"""Per-response analysis combining detection, behavior and completeness."""

from collections.abc import Callable

from chainbench.analysis.behavior import classify_behavior
from chainbench.analysis.completeness import score_completeness
from chainbench.analysis.detector import detect
from chainbench.analysis.models import AnalysisResult, Detection


DetectorFn = Callable[[str], Detection]


def analyze_response(text: str, detector: DetectorFn | None = None) -> AnalysisResult:
    """Analyze one response.

    Args:
        text: Raw response text.
        detector: Network detector to use. Defaults to the pattern-based
            detector; any callable with the same contract works.

    Returns:
        AnalysisResult bundling all three classifications.
    """
    detection = (detector or detect)(text)
    return AnalysisResult(
        detection=detection,
        behavior=classify_behavior(text),
        completeness=score_completeness(text),
    )
