"""Additive completeness scoring for build responses."""

import re

from chainbench.analysis.models import CompletenessScore


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _any_match(patterns: tuple[re.Pattern[str], ...], text: str) -> bool:
    return any(p.search(text) for p in patterns)


CONTRACT_PATTERNS = _compile(
    r"pragma solidity",
    r"contract\s+\w+\s*\{",
    r"anchor_lang",
    r"program_id!",
    r"#\[program\]",
    r"module\s+\w+\s*\{",
)
_DEPLOY_KEYWORD = re.compile(r"deploy", re.IGNORECASE)
DEPLOY_TOOL_PATTERNS = _compile(
    r"script",
    r"npx\s+hardhat",
    r"forge\s+(script|create|deploy)",
    r"anchor\s+deploy",
    r"migration",
)
_UI_FRAMEWORK = re.compile(r"react|next\.?js|vue|svelte", re.IGNORECASE)
_IMPORT = re.compile(r"import", re.IGNORECASE)
FRONTEND_PATTERNS = _compile(
    r"useState|useEffect|component",
    r"\.tsx|\.jsx",
    r"connect.*wallet",
)
TEST_PATTERNS = _compile(
    r"describe\s*\(",
    r"it\s*\(\s*[\"']",
    r"expect\s*\(",
    r"#\[test\]",
    r"test.*\.js|test.*\.ts|\.test\.",
    r"forge test",
)
_FUNCTION = re.compile(r"function\s+\w+|pub\s+fn\s+\w+|entry\s+fun\s+\w+", re.IGNORECASE)
_PLACEHOLDER = re.compile(r"TODO|FIXME|PLACEHOLDER|// \.\.\.|# \.\.\.", re.IGNORECASE)
_CODE_FENCE = "```"

CONTRACT_POINTS = 25
POINTS_PER_FUNCTION = 2
MAX_FUNCTION_POINTS = 10
DEPLOY_POINTS = 20
FRONTEND_POINTS = 20
TEST_POINTS = 15
POINTS_PER_CODE_BLOCK = 2
MAX_CODE_BLOCK_POINTS = 10
PLACEHOLDER_PENALTY = 2
MAX_SCORE = 100


def score_completeness(text: str) -> CompletenessScore:
    """Score how complete a build response is, 0-100.

    Points:
        contract +25 (+2 per function, up to +10), deploy steps +20,
        frontend +20, tests +15, +2 per fenced block (up to +10),
        -2 per TODO/FIXME/PLACEHOLDER/ellipsis comment.

    Args:
        text: Raw response text.

    Returns:
        CompletenessScore with the score and the flags behind it.
    """
    has_contract = _any_match(CONTRACT_PATTERNS, text)
    has_deploy_script = bool(_DEPLOY_KEYWORD.search(text)) and _any_match(
        DEPLOY_TOOL_PATTERNS, text
    )
    has_frontend = (
        bool(_UI_FRAMEWORK.search(text) and _IMPORT.search(text))
        or _any_match(FRONTEND_PATTERNS, text)
    )
    has_tests = _any_match(TEST_PATTERNS, text)
    todo_count = sum(1 for _ in _PLACEHOLDER.finditer(text))
    code_blocks = text.count(_CODE_FENCE) // 2

    score = 0
    if has_contract:
        function_count = sum(1 for _ in _FUNCTION.finditer(text))
        score += CONTRACT_POINTS + min(
            function_count * POINTS_PER_FUNCTION, MAX_FUNCTION_POINTS
        )
    if has_deploy_script:
        score += DEPLOY_POINTS
    if has_frontend:
        score += FRONTEND_POINTS
    if has_tests:
        score += TEST_POINTS
    score += min(code_blocks * POINTS_PER_CODE_BLOCK, MAX_CODE_BLOCK_POINTS)

    score = min(max(0, score - todo_count * PLACEHOLDER_PENALTY), MAX_SCORE)

    return CompletenessScore(
        score=score,
        has_contract=has_contract,
        has_deploy_script=has_deploy_script,
        has_frontend=has_frontend,
        has_tests=has_tests,
        todo_count=todo_count,
    )
