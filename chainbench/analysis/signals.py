"""Signal catalog for the pattern-based chain detector.

Each signal is a plain record: a regex, the network it points at, a weight
and the label reported as evidence. Signals targeting ``GENERIC_FAMILY``
describe tooling shared by every EVM network; the detector resolves them
after all label-specific scores are known.

Weights run from 3 (loose mentions) to 10 (chain IDs, SDK imports,
explorer domains). Patterns are matched case-insensitively. Adding a
signal is a one-line change here; the scoring code never needs to know.
"""

from dataclasses import dataclass

from chainbench.analysis.constants import GENERIC_FAMILY


@dataclass(frozen=True)
class Signal:
    """One pattern-to-label scoring rule.

    Attributes:
        pattern: Regular expression source, compiled case-insensitively.
        network: Target network label, or ``GENERIC_FAMILY``.
        weight: Points per counted match.
        label: Evidence label shown to readers.
    """

    pattern: str
    network: str
    weight: int
    label: str

    @property
    def is_generic(self) -> bool:
        """Check if the signal is shared by the whole EVM family."""
        return self.network == GENERIC_FAMILY


_EVM = GENERIC_FAMILY

SIGNALS: tuple[Signal, ...] = (
    # Shared EVM tooling, no specific network
    Signal(r"pragma solidity", _EVM, 10, "pragma solidity"),
    Signal(r"\.sol\b", _EVM, 5, ".sol file reference"),
    Signal(r"hardhat", _EVM, 7, "Hardhat"),
    Signal(r"foundry|forge", _EVM, 7, "Foundry/Forge"),
    Signal(r"truffle", _EVM, 6, "Truffle"),
    Signal(r"remix", _EVM, 4, "Remix"),
    Signal(r"ethers\.js|ethers\.", _EVM, 6, "ethers.js"),
    Signal(r"web3\.js|web3\.", _EVM, 5, "web3.js"),
    Signal(r"ERC-?20|ERC-?721|ERC-?1155", _EVM, 8, "ERC standard"),
    Signal(r"openzeppelin", _EVM, 7, "OpenZeppelin"),
    Signal(r"\babi\b.*encode|abi\.encode", _EVM, 6, "ABI encoding"),
    Signal(r"msg\.sender", _EVM, 8, "msg.sender"),
    Signal(r"require\s*\(.*,\s*[\"']", _EVM, 5, "Solidity require()"),
    Signal(r"mapping\s*\(", _EVM, 5, "Solidity mapping"),
    Signal(r"modifier\s+\w+", _EVM, 5, "Solidity modifier"),
    Signal(r"emit\s+\w+\s*\(", _EVM, 4, "Solidity emit"),
    Signal(r"payable", _EVM, 4, "payable keyword"),
    Signal(r"scaffold[- ]?eth", _EVM, 7, "Scaffold-ETH"),
    Signal(r"wagmi", _EVM, 6, "wagmi"),
    Signal(r"viem", _EVM, 6, "viem"),
    Signal(r"infura|alchemy", _EVM, 4, "Infura/Alchemy"),
    Signal(r"metamask", _EVM, 4, "MetaMask"),
    Signal(r"\bsolidity\b", _EVM, 6, "Solidity mention"),
    Signal(r"\bethereumj?\b", _EVM, 3, "Ethereum mention"),
    # Ethereum L1
    Signal(r"ethereum\s+mainnet", "Mainnet", 10, "ethereum mainnet"),
    Signal(r"\bchain\s*id\s*[:=]?\s*1\b", "Mainnet", 8, "chainId 1"),
    Signal(r"mainnet\.infura", "Mainnet", 9, "mainnet.infura"),
    Signal(r"etherscan\.io", "Mainnet", 6, "etherscan.io"),
    Signal(r"\betherscan\b", "Mainnet", 4, "etherscan"),
    Signal(r"ethereum\s+l1\b", "Mainnet", 7, "Ethereum L1"),
    Signal(r"sepolia|goerli", "Mainnet", 5, "Ethereum testnet"),
    # Base
    Signal(r"\bbase\s+(chain|network|l2)\b", "Base", 10, "Base chain/network/l2"),
    Signal(r"base[- ]?sepolia", "Base", 9, "base-sepolia"),
    Signal(r"\bchain\s*id\s*[:=]?\s*8453\b", "Base", 10, "chainId 8453"),
    Signal(r"basescan\.org", "Base", 9, "basescan.org"),
    Signal(r"\bbasescan\b", "Base", 7, "basescan"),
    Signal(r"deploy\s+(to|on)\s+base\b", "Base", 9, "deploy to base"),
    Signal(r"\bbase\s+mainnet\b", "Base", 9, "Base mainnet"),
    Signal(r"\bon\s+base\b", "Base", 6, "on Base"),
    # Arbitrum
    Signal(r"\barbitrum\b", "Arbitrum", 8, "arbitrum"),
    Signal(r"arbitrum\s+one", "Arbitrum", 9, "Arbitrum One"),
    Signal(r"arbitrum\s+nova", "Arbitrum", 9, "Arbitrum Nova"),
    Signal(r"arbitrum[- ]?sepolia", "Arbitrum", 8, "Arbitrum Sepolia"),
    Signal(r"\bchain\s*id\s*[:=]?\s*42161\b", "Arbitrum", 10, "chainId 42161"),
    Signal(r"arbiscan", "Arbitrum", 8, "arbiscan"),
    Signal(r"arbitrum\s+sdk", "Arbitrum", 7, "Arbitrum SDK"),
    # Optimism
    Signal(r"\boptimism\b", "Optimism", 8, "optimism"),
    Signal(r"\bop\s+mainnet\b", "Optimism", 9, "OP Mainnet"),
    Signal(r"\bop\s+stack\b", "Optimism", 7, "OP Stack"),
    Signal(r"\bchain\s*id\s*[:=]?\s*10\b", "Optimism", 8, "chainId 10"),
    Signal(r"optimistic\.etherscan", "Optimism", 9, "optimistic.etherscan"),
    Signal(r"op[- ]?sepolia", "Optimism", 8, "op-sepolia"),
    # Polygon
    Signal(r"\bpolygon\b", "Polygon", 7, "polygon"),
    Signal(r"\bmatic\b", "Polygon", 6, "matic"),
    Signal(r"polygon\s+pos\b", "Polygon", 8, "Polygon PoS"),
    Signal(r"polygon\s+zkevm", "Polygon", 8, "Polygon zkEVM"),
    Signal(r"\bmumbai\b", "Polygon", 6, "mumbai"),
    Signal(r"\bamoy\b", "Polygon", 7, "amoy"),
    Signal(r"\bchain\s*id\s*[:=]?\s*137\b", "Polygon", 10, "chainId 137"),
    Signal(r"polygonscan", "Polygon", 8, "polygonscan"),
    Signal(r"mumbai\s*testnet", "Polygon", 6, "Mumbai testnet"),
    # zkSync
    Signal(r"\bzksync\b", "zkSync", 9, "zkSync"),
    Signal(r"zksync\s+era", "zkSync", 9, "zkSync Era"),
    Signal(r"zksync\s+lite", "zkSync", 8, "zkSync Lite"),
    Signal(r"\bchain\s*id\s*[:=]?\s*324\b", "zkSync", 10, "chainId 324"),
    # Scroll (the UI verb "scroll down" is not the chain)
    Signal(
        r"\bscroll\b(?!\s*(down|up|bar|to\s+the|through|ing))", "Scroll", 6, "scroll"
    ),
    Signal(r"scroll\s+mainnet", "Scroll", 9, "Scroll mainnet"),
    Signal(r"scroll[- ]?sepolia", "Scroll", 8, "Scroll Sepolia"),
    Signal(r"scrollscan", "Scroll", 8, "scrollscan"),
    Signal(r"\bchain\s*id\s*[:=]?\s*534352\b", "Scroll", 10, "chainId 534352"),
    # Linea
    Signal(r"\blinea\b", "Linea", 8, "linea"),
    Signal(r"linea\s+mainnet", "Linea", 9, "Linea mainnet"),
    Signal(r"linea[- ]?sepolia", "Linea", 8, "Linea Sepolia"),
    Signal(r"\bchain\s*id\s*[:=]?\s*59144\b", "Linea", 10, "chainId 59144"),
    Signal(r"lineascan", "Linea", 8, "lineascan"),
    # Mantle
    Signal(r"\bmantle\b", "Mantle", 8, "mantle"),
    Signal(r"mantle\s+mainnet", "Mantle", 9, "Mantle mainnet"),
    Signal(r"mantle[- ]?sepolia", "Mantle", 8, "Mantle Sepolia"),
    Signal(r"\bchain\s*id\s*[:=]?\s*5000\b", "Mantle", 10, "chainId 5000"),
    Signal(r"mantlescan", "Mantle", 8, "mantlescan"),
    # BSC
    Signal(r"\bbsc\b|bnb\s+chain|binance\s+smart\s+chain", "BSC", 7, "BSC/BNB Chain"),
    Signal(r"bscscan", "BSC", 8, "bscscan"),
    Signal(r"\bchain\s*id\s*[:=]?\s*56\b", "BSC", 10, "chainId 56"),
    Signal(r"pancakeswap", "BSC", 7, "PancakeSwap"),
    # Avalanche
    Signal(r"avalanche|avax", "Avalanche", 6, "Avalanche/AVAX"),
    Signal(r"c-chain", "Avalanche", 5, "C-Chain"),
    Signal(r"snowtrace", "Avalanche", 8, "Snowtrace"),
    Signal(r"\bchain\s*id\s*[:=]?\s*43114\b", "Avalanche", 10, "chainId 43114"),
    # Solana
    Signal(r"anchor_lang|use anchor", "Solana", 10, "anchor_lang"),
    Signal(r"\bsolana[_-]?program\b", "Solana", 9, "solana_program"),
    Signal(r"\bspl[_-]token\b", "Solana", 9, "SPL token"),
    Signal(r"\bPubkey\b", "Solana", 6, "Pubkey type"),
    Signal(r"\b(solana|sol)\s+cli\b", "Solana", 7, "Solana CLI"),
    Signal(r"metaplex", "Solana", 8, "Metaplex"),
    Signal(r"\bdevnet\b", "Solana", 3, "devnet"),
    Signal(r"@solana/web3", "Solana", 8, "@solana/web3.js"),
    Signal(r"borsh", "Solana", 5, "Borsh serialization"),
    Signal(r"phantom\s*wallet", "Solana", 5, "Phantom wallet"),
    Signal(r"\bAccountInfo\b", "Solana", 5, "AccountInfo"),
    Signal(r"program_id", "Solana", 6, "program_id"),
    Signal(r"\bsolana\b", "Solana", 5, "Solana mention"),
    Signal(r"\brust\b.*\bcontract", "Solana", 3, "Rust contract"),
    # Sui
    Signal(r"\bsui::", "Sui", 10, "sui:: module"),
    Signal(r"move\.toml", "Sui", 8, "Move.toml"),
    Signal(r"\bmove\s+language\b", "Sui", 6, "Move language"),
    Signal(r"sui\s+move", "Sui", 9, "Sui Move"),
    Signal(r"\bobject::new\b", "Sui", 7, "object::new"),
    # Aptos
    Signal(r"aptos::", "Aptos", 10, "aptos:: module"),
    Signal(r"aptos\s+move", "Aptos", 9, "Aptos Move"),
    Signal(r"\baptos_framework\b", "Aptos", 8, "aptos_framework"),
    # Cosmos
    Signal(r"cosmwasm", "Cosmos", 10, "CosmWasm"),
    Signal(r"cosmos[- ]?sdk", "Cosmos", 9, "Cosmos SDK"),
    Signal(r"tendermint", "Cosmos", 7, "Tendermint"),
    Signal(r"\bibc\b", "Cosmos", 4, "IBC"),
    # Near
    Signal(r"near[_-]?sdk", "Near", 10, "near-sdk"),
    Signal(r"#\[near_bindgen\]", "Near", 10, "near_bindgen"),
    Signal(r"near\s+protocol", "Near", 7, "NEAR Protocol"),
    # Polkadot / Substrate
    Signal(r"substrate", "Polkadot", 8, "Substrate"),
    Signal(r"ink!", "Polkadot", 9, "ink!"),
    Signal(r"polkadot", "Polkadot", 7, "Polkadot"),
    # TON
    Signal(r"\bton\b.*\bblockchain\b|\bton\b.*\bcontract", "TON", 7, "TON blockchain"),
    Signal(r"\bfunc\b.*\bton\b|\btact\b", "TON", 8, "FunC/Tact"),
)

# Evidence labels that name a developer tool rather than a chain fact
TOOL_LABELS: frozenset[str] = frozenset(
    {
        "Hardhat",
        "Foundry/Forge",
        "Truffle",
        "Remix",
        "ethers.js",
        "web3.js",
        "OpenZeppelin",
        "Scaffold-ETH",
        "wagmi",
        "viem",
        "Infura/Alchemy",
        "MetaMask",
        "anchor_lang",
        "@solana/web3.js",
        "Metaplex",
        "Solana CLI",
        "Phantom wallet",
        "Sui Move",
        "Aptos Move",
        "CosmWasm",
        "Cosmos SDK",
        "Tendermint",
        "near-sdk",
        "Substrate",
        "ink!",
    }
)
