"""Chain detector backed by repeated LLM classification calls.

Each response is classified several times in parallel and the label
is chosen by majority vote, which damps run-to-run variance of the
classifier.
"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor

import structlog

from chainbench.analysis.constants import UNKNOWN_LABEL, VALID_NETWORKS, get_ecosystem
from chainbench.analysis.models import Detection, EvidenceItem, Strength
from chainbench.data_model.rounding import round_half_up
from chainbench.features.llm.errors import LlmClassificationError, LlmProcessingError
from chainbench.features.llm.json_utils import parse_json_object, unwrap_structured_output
from chainbench.features.llm.models import LlmVote
from chainbench.features.llm.prompts import build_classification_prompt
from chainbench.features.llm.protocols import LlmClient


logger = structlog.get_logger()

DEFAULT_VOTES = 3

_VALID_BY_LOWER = {label.lower(): label for label in VALID_NETWORKS}


def normalize_network(label: str) -> str:
    """Map a classifier label onto the valid set, case-insensitively.

    Returns ``Unknown`` for labels outside the set.
    """
    if label in VALID_NETWORKS:
        return label
    normalized = _VALID_BY_LOWER.get(label.strip().lower())
    if normalized is None:
        logger.warning(
            "llm_unknown_network",
            component="llm",
            subcomponent="detector",
            label=label,
        )
        return UNKNOWN_LABEL
    return normalized


def parse_vote(raw_output: str) -> LlmVote:
    """Parse one classifier output into a vote.

    Raises:
        LlmProcessingError: If required fields are missing or mistyped.
    """
    result = unwrap_structured_output(parse_json_object(raw_output))
    network = result.get("network")
    confidence = result.get("confidence")
    reasoning = result.get("reasoning")
    if (
        not isinstance(network, str)
        or not network
        or isinstance(confidence, bool)
        or not isinstance(confidence, (int, float))
        or not isinstance(reasoning, str)
        or not reasoning
    ):
        msg = f"Unexpected LLM output shape: {str(result)[:200]}"
        raise LlmProcessingError(msg)

    mentioned = result.get("mentioned_chains") or []
    return LlmVote(
        network=normalize_network(network),
        confidence=float(confidence),
        reasoning=reasoning,
        mentioned_chains=[str(c) for c in mentioned] if isinstance(mentioned, list) else [],
    )


def tally_votes(votes: list[LlmVote], requested: int) -> Detection:
    """Reduce votes to a detection.

    Ties go to the label seen first. Strength is ``strong`` when every
    requested call agreed, ``weak`` for a strict majority of the
    successful calls, ``implicit`` otherwise.

    Args:
        votes: Successful votes in call order. Must not be empty.
        requested: Number of calls that were issued.
    """
    counts = Counter(vote.network for vote in votes)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    winner, winner_votes = ranked[0]

    if winner_votes == requested:
        strength = Strength.STRONG
    elif winner_votes * 2 > len(votes):
        strength = Strength.WEAK
    else:
        strength = Strength.IMPLICIT

    aligned = next(vote for vote in votes if vote.network == winner)
    confidence = min(100, max(0, round_half_up(aligned.confidence)))
    return Detection(
        network=winner,
        ecosystem=get_ecosystem(winner),
        confidence=confidence,
        strength=strength,
        evidence=[EvidenceItem(label=aligned.reasoning)],
        scores=dict(ranked),
        reasoning=aligned.reasoning,
    )


class LlmChainDetector:
    """Classifies responses with an LLM client and a majority vote."""

    def __init__(self, client: LlmClient, votes: int = DEFAULT_VOTES) -> None:
        """Initialize the detector.

        Args:
            client: Client used for each classification call.
            votes: Number of independent calls per response. Use an odd number.
        """
        if votes < 1:
            msg = "votes must be at least 1"
            raise ValueError(msg)
        self._client = client
        self._votes = votes
        self._log = logger.bind(component="llm", subcomponent="detector")

    def classify_once(self, text: str, prompt_text: str) -> LlmVote:
        """Issue one classification call."""
        raw = self._client.generate_content(
            text, system_instruction=build_classification_prompt(prompt_text)
        )
        return parse_vote(raw)

    def detect(self, text: str, prompt_text: str = "") -> Detection:
        """Classify a response by majority vote.

        Args:
            text: Response text to classify.
            prompt_text: The prompt the response answered.

        Returns:
            Detection whose ``all`` map holds vote counts.

        Raises:
            LlmClassificationError: If every call failed.
        """
        with ThreadPoolExecutor(max_workers=self._votes) as executor:
            futures = [
                executor.submit(self.classify_once, text, prompt_text)
                for _ in range(self._votes)
            ]

        votes: list[LlmVote] = []
        errors: list[str] = []
        for index, future in enumerate(futures):
            try:
                votes.append(future.result())
            except Exception as e:  # noqa: BLE001
                errors.append(str(e))
                self._log.warning("llm_vote_failed", vote_index=index, error=str(e))

        if not votes:
            msg = f"All {self._votes} classification calls failed: {errors[0][:200]}"
            raise LlmClassificationError(msg)

        detection = tally_votes(votes, self._votes)
        self._log.debug(
            "llm_vote_complete",
            network=detection.network,
            strength=detection.strength.value,
            votes=detection.scores,
            failed_votes=len(errors),
        )
        return detection
