"""Prompt and output schema for LLM chain classification."""

import json

from chainbench.analysis.constants import VALID_NETWORKS


CLASSIFICATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "network": {
            "type": "string",
            "description": "The primary network the response favors",
        },
        "confidence": {"type": "number", "description": "0-100 confidence"},
        "reasoning": {"type": "string", "description": "1-2 sentence explanation"},
        "mentioned_chains": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "All blockchain networks mentioned or discussed in the response"
            ),
        },
    },
    "required": ["network", "confidence", "reasoning", "mentioned_chains"],
}

CLASSIFICATION_SCHEMA_JSON = json.dumps(CLASSIFICATION_SCHEMA)

_RULES = """\
Rules (in priority order):
1. Explicit recommendation: if the response recommends a specific chain by name, return that chain
2. Concrete example: if the response lists multiple chains but then provides a concrete tech stack, code snippet, or tutorial targeting one specific chain, that chain wins. The example reveals the model's default preference, even if alternatives were discussed earlier.
3. Code targeting a chain: if the response writes code (deploy scripts, contract addresses, chain IDs, RPC URLs) for one specific chain, return that chain
4. Generic Ethereum: if it says "Ethereum" or "an Ethereum L2" without picking a specific L2, or uses generic EVM/Solidity code with no specific network, return "Unspecified"
5. Multiple equal options: if it lists multiple chains equally and never narrows down to one (no concrete example, no code), return "Unspecified"
6. No blockchain: if no blockchain is mentioned at all, or the response refuses/is chain-agnostic, return "Unknown"
7. "Mainnet" means Ethereum L1 specifically"""


def build_classification_prompt(prompt_text: str) -> str:
    """Build the system instruction for classifying one response.

    Args:
        prompt_text: The benchmark prompt the response answered.

    Returns:
        Instruction text; the response itself is sent as the user input.
    """
    return (
        "Classify which blockchain this AI response favors. "
        f'The original prompt was: "{prompt_text}"\n\n'
        f"{_RULES}\n\n"
        f"Valid networks: {', '.join(VALID_NETWORKS)}\n\n"
        "Respond with a JSON object with keys network, confidence, reasoning "
        "and mentioned_chains."
    )
