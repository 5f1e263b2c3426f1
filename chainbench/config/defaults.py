"""Built-in prompt set and model roster."""

from chainbench.config.schemas import BenchmarkConfig, ModelEntry, PromptConfig
from chainbench.store.models import ModelTier


DEFAULT_MODELS: tuple[ModelEntry, ...] = (
    ModelEntry(
        id="claude-opus-4-6",
        provider="anthropic",
        tier=ModelTier.FLAGSHIP,
        display_name="Claude Opus 4.6",
    ),
    ModelEntry(
        id="claude-sonnet-4-5-20250929",
        provider="anthropic",
        tier=ModelTier.MID_TIER,
        display_name="Claude Sonnet 4.5",
    ),
    ModelEntry(
        id="gpt-5.2",
        provider="openai",
        tier=ModelTier.FLAGSHIP,
        display_name="GPT-5.2",
    ),
    ModelEntry(
        id="gpt-5-mini",
        provider="openai",
        tier=ModelTier.MID_TIER,
        display_name="GPT-5 mini",
    ),
    ModelEntry(
        id="gemini-3-pro-preview",
        provider="google",
        tier=ModelTier.FLAGSHIP,
        display_name="Gemini 3 Pro",
    ),
    ModelEntry(
        id="gemini-3-flash-preview",
        provider="google",
        tier=ModelTier.MID_TIER,
        display_name="Gemini 3 Flash",
    ),
)

DEFAULT_PROMPTS: tuple[PromptConfig, ...] = (
    # DeFi
    PromptConfig(
        id="token-launch",
        text=(
            "Build me a platform where creators can launch their own "
            "cryptocurrency and let people trade it."
        ),
        category="DeFi",
    ),
    PromptConfig(
        id="memecoin",
        text=(
            "Help me create and launch a meme coin with a website where people "
            "can buy it directly."
        ),
        category="DeFi",
    ),
    PromptConfig(
        id="prediction-market",
        text=(
            "Create a platform where users can place bets on real-world events "
            "using crypto, with automatic payouts."
        ),
        category="DeFi",
    ),
    # NFT
    PromptConfig(
        id="nft-marketplace",
        text=(
            "Create a marketplace for digital collectibles where artists can "
            "sell their work and earn on resales."
        ),
        category="NFT",
    ),
    # Governance
    PromptConfig(
        id="dao-voting",
        text=(
            "Build a community voting system where coin holders can submit "
            "proposals and vote on decisions."
        ),
        category="Governance",
    ),
    # Gaming
    PromptConfig(
        id="onchain-game",
        text=(
            "Build a blockchain game where players can collect, trade, and "
            "battle with digital creatures."
        ),
        category="Gaming",
    ),
    # Recommendation
    PromptConfig(
        id="which-chain",
        text=(
            "I want to build a crypto app. Which blockchain should I build on "
            "and why?"
        ),
        category="Recommendation",
    ),
    # Agent
    PromptConfig(
        id="ai-agent",
        text=(
            "Build me an AI agent that can autonomously trade crypto and manage "
            "a wallet."
        ),
        category="Agent",
    ),
    # Infrastructure
    PromptConfig(
        id="token-bridge",
        text=(
            "Build a way for users to move their crypto between two different "
            "blockchains."
        ),
        category="Infrastructure",
    ),
    PromptConfig(
        id="block-explorer",
        text=(
            "Create a website that lets people look up transactions, wallet "
            "balances, and activity on a blockchain."
        ),
        category="Infrastructure",
    ),
    # Social
    PromptConfig(
        id="social-tipping",
        text=(
            "Build a platform where fans can send crypto tips to their "
            "favorite content creators."
        ),
        category="Social",
    ),
    # Registry
    PromptConfig(
        id="name-service",
        text=(
            "Create a service where people can register a readable name for "
            "their crypto wallet instead of a long address."
        ),
        category="Registry",
    ),
)


def default_config() -> BenchmarkConfig:
    """Build the configuration used when no benchmark file is given."""
    return BenchmarkConfig(
        prompts=list(DEFAULT_PROMPTS),
        models=list(DEFAULT_MODELS),
    )
