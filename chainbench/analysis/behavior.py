"""Heuristic classifier for clarifying-question versus build behavior."""

import re

from chainbench.analysis.models import Behavior, BehaviorClassification


_QUESTION_LINE = re.compile(r"\?\s*$", re.MULTILINE)

QUESTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    _QUESTION_LINE,
    re.compile(r"would you (like|prefer|want)", re.IGNORECASE),
    re.compile(r"do you (want|need|have)", re.IGNORECASE),
    re.compile(r"which (one|option|approach|framework)", re.IGNORECASE),
    re.compile(r"should (I|we) (use|go|choose)", re.IGNORECASE),
    re.compile(r"what (kind|type|sort) of", re.IGNORECASE),
    re.compile(r"could you (clarify|specify|tell)", re.IGNORECASE),
    re.compile(r"before (I|we) (proceed|start|begin|continue)", re.IGNORECASE),
    re.compile(r"a few questions", re.IGNORECASE),
    re.compile(r"let me (ask|clarify|know)", re.IGNORECASE),
)

DECISION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"I'll use (\w[\w\s./-]*)", re.IGNORECASE),
    re.compile(
        r"let's (use|go with|build with|choose|pick) (\w[\w\s./-]*)", re.IGNORECASE
    ),
    re.compile(r"I'?m going to use (\w[\w\s./-]*)", re.IGNORECASE),
    re.compile(r"we'll use (\w[\w\s./-]*)", re.IGNORECASE),
    re.compile(r"using (\w+) (framework|library|tool|SDK)", re.IGNORECASE),
    re.compile(r"I'll (create|build|implement|set up|deploy)", re.IGNORECASE),
    re.compile(r"here's (the|a|my) (complete|full|working)", re.IGNORECASE),
)

_CODE_FENCE = "```"

# Slack allowed on top of "?"-terminated lines
QUESTION_SLACK = 5
MIN_QUESTIONS = 3
MIN_FENCE_MARKERS = 2
MAX_DECISIONS_COLLECTED = 10
MAX_DECISIONS_REPORTED = 5
_DECISION_MIN_LEN = 5
_DECISION_MAX_LEN = 100


def _count(pattern: re.Pattern[str], text: str) -> int:
    return sum(1 for _ in pattern.finditer(text))


def _extract_decisions(text: str) -> list[str]:
    """Collect decision statements in pattern order."""
    decisions: list[str] = []
    for pattern in DECISION_PATTERNS:
        for match in pattern.finditer(text):
            decision = match.group(0).strip()
            if _DECISION_MIN_LEN < len(decision) < _DECISION_MAX_LEN:
                decisions.append(decision)
            if len(decisions) >= MAX_DECISIONS_COLLECTED:
                return decisions
    return decisions


def classify_behavior(text: str) -> BehaviorClassification:
    """Label a response as asking questions, building, or both.

    Phrase patterns overlap with "?"-terminated lines, so the total is
    capped at the number of such lines plus a small slack.

    Args:
        text: Raw response text.

    Returns:
        BehaviorClassification with question count and decisions.
    """
    total_matches = sum(_count(pattern, text) for pattern in QUESTION_PATTERNS)
    question_lines = _count(_QUESTION_LINE, text)
    questions_asked = min(total_matches, question_lines + QUESTION_SLACK)

    has_questions = questions_asked >= MIN_QUESTIONS
    has_code = text.count(_CODE_FENCE) >= MIN_FENCE_MARKERS

    if has_questions and not has_code:
        behavior = Behavior.ASKED_QUESTIONS
    elif has_questions:
        behavior = Behavior.MIXED
    else:
        behavior = Behavior.JUST_BUILT

    return BehaviorClassification(
        behavior=behavior,
        questions_asked=questions_asked,
        decisions_stated=_extract_decisions(text)[:MAX_DECISIONS_REPORTED],
    )
