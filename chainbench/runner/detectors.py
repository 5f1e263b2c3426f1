"""Detector selection for runners.

Runners receive a factory that, given the prompt text, returns the
detector for responses to that prompt. The pattern detector ignores the
prompt; the LLM detector quotes it in its instruction.
"""

from collections.abc import Callable
from functools import partial

from chainbench.analysis.analyzer import DetectorFn
from chainbench.analysis.detector import detect
from chainbench.features.llm.detector import LlmChainDetector


DetectorFactory = Callable[[str], DetectorFn]

DETECTOR_PATTERN = "pattern"
DETECTOR_LLM = "llm"
DETECTOR_NAMES = (DETECTOR_PATTERN, DETECTOR_LLM)


def pattern_detector_factory(prompt_text: str) -> DetectorFn:  # noqa: ARG001
    """Return the deterministic pattern detector."""
    return detect


def llm_detector_factory(detector: LlmChainDetector) -> DetectorFactory:
    """Bind an LLM detector to each prompt's text."""

    def factory(prompt_text: str) -> DetectorFn:
        return partial(detector.detect, prompt_text=prompt_text)

    return factory
