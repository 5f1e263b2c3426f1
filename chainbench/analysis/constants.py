"""Constants for the analysis module."""

# Family marker for signals shared by every EVM-compatible network
GENERIC_FAMILY = "EVM"

# Label filed when only family-generic signals fired
UNSPECIFIED_NETWORK = "Unspecified"

UNKNOWN_LABEL = "Unknown"
CHAIN_AGNOSTIC_LABEL = "Chain-Agnostic"

# Matches per signal beyond this count add no score
MAX_COUNTED_MATCHES = 3

# Label-specific signals at or above this weight are explicit identifiers
# (chain IDs, named testnets, explorer domains, SDK imports)
STRONG_SIGNAL_WEIGHT = 8

# Highest confidence reported while more than one label scored
MAX_CONTESTED_CONFIDENCE = 99

# Networks eligible to absorb the generic EVM score
EVM_NETWORKS: frozenset[str] = frozenset(
    {
        "Mainnet",
        "Base",
        "Arbitrum",
        "Optimism",
        "Polygon",
        "zkSync",
        "Scroll",
        "Linea",
        "Mantle",
        "BSC",
        "Avalanche",
    }
)

ETHEREUM_ECOSYSTEM = "Ethereum Ecosystem"

NETWORK_TO_ECOSYSTEM: dict[str, str] = {
    "Mainnet": ETHEREUM_ECOSYSTEM,
    "Base": ETHEREUM_ECOSYSTEM,
    "Arbitrum": ETHEREUM_ECOSYSTEM,
    "Optimism": ETHEREUM_ECOSYSTEM,
    "Polygon": ETHEREUM_ECOSYSTEM,
    "zkSync": ETHEREUM_ECOSYSTEM,
    "Scroll": ETHEREUM_ECOSYSTEM,
    "Linea": ETHEREUM_ECOSYSTEM,
    "Mantle": ETHEREUM_ECOSYSTEM,
    UNSPECIFIED_NETWORK: ETHEREUM_ECOSYSTEM,
    "BSC": "BSC",
    "Avalanche": "Avalanche",
    "Solana": "Solana",
    "Sui": "Sui",
    "Aptos": "Aptos",
    "Cosmos": "Cosmos",
    "Near": "Near",
    "Polkadot": "Polkadot",
    "TON": "TON",
}

# Every label an external classifier may return
VALID_NETWORKS: tuple[str, ...] = (*NETWORK_TO_ECOSYSTEM, UNKNOWN_LABEL)

# Human-facing names for fallback labels
DISPLAY_NAMES: dict[str, str] = {
    UNSPECIFIED_NETWORK: "Ethereum (No Specific L2)",
    UNKNOWN_LABEL: "Chain Agnostic",
}


def get_ecosystem(network: str) -> str:
    """Map a network label to its ecosystem, ``Unknown`` when unmapped."""
    return NETWORK_TO_ECOSYSTEM.get(network, UNKNOWN_LABEL)


def get_display_name(label: str) -> str:
    """Return the human-facing name for a network or ecosystem label."""
    return DISPLAY_NAMES.get(label, label)
