"""Unit tests for grid and result-set reducers."""

import pytest

from chainbench.analysis.constants import ETHEREUM_ECOSYSTEM
from chainbench.analysis.models import EvidenceItem
from chainbench.grid.builder import build_grid
from chainbench.grid.models import Grid
from chainbench.grid.reducers import (
    compare_result_sets,
    compute_comparison,
    default_label_summary,
    latency_per_model,
    overall_distribution,
    per_category_distribution,
    per_model_distribution,
    per_prompt_labels,
    resolve_category,
    result_distribution,
    tool_frequency,
)
from tests.helpers.factories import make_model, make_result


GPT = make_model("gpt-5.2", "openai", display_name="GPT-5.2")


@pytest.fixture
def grid() -> Grid:
    """Two prompts by two models."""
    return build_grid(
        [
            make_result(prompt_id="p1", network="Base", category="DeFi", latency_ms=1000),
            make_result(prompt_id="p1", network="Solana", category="DeFi", latency_ms=3000),
            make_result(prompt_id="p2", network="Base", category="Advisory"),
            make_result(prompt_id="p1", network="Solana", model=GPT, latency_ms=500),
            make_result(prompt_id="p2", network="Solana", model=GPT, latency_ms=1500),
        ]
    )


class TestDistributions:
    """Tests for count-map reducers."""

    def test_overall_distribution_sums_runs(self, grid: Grid) -> None:
        """Every run counts once."""
        assert overall_distribution(grid) == {ETHEREUM_ECOSYSTEM: 2, "Solana": 3}

    def test_overall_network_distribution(self, grid: Grid) -> None:
        """Network counts sum the same way."""
        assert overall_distribution(grid, "network") == {"Base": 2, "Solana": 3}

    def test_network_placeholder_excluded(self) -> None:
        """The N/A placeholder is not a network."""
        grid = build_grid([make_result(network="N/A"), make_result(network="Base")])

        assert overall_distribution(grid, "network") == {"Base": 1}

    def test_per_model_distribution(self, grid: Grid) -> None:
        """Counts are summed per model in grid order."""
        rows = per_model_distribution(grid)

        assert [(model.id, counts) for model, counts in rows] == [
            ("claude-opus-4-6", {ETHEREUM_ECOSYSTEM: 2, "Solana": 1}),
            ("gpt-5.2", {"Solana": 2}),
        ]

    def test_per_category_renames_legacy_names(self, grid: Grid) -> None:
        """Legacy category names group under their new names."""
        breakdown = per_category_distribution(grid)

        assert list(breakdown) == ["DeFi", "Recommendation"]
        assert breakdown["DeFi"]["claude-opus-4-6"] == {
            ETHEREUM_ECOSYSTEM: 1,
            "Solana": 1,
        }
        assert breakdown["Recommendation"]["gpt-5.2"] == {"Solana": 1}

    def test_resolve_category(self) -> None:
        """Unknown names pass through unchanged."""
        assert resolve_category("Identity") == "Registry"
        assert resolve_category("Gaming") == "Gaming"

    def test_per_prompt_labels(self, grid: Grid) -> None:
        """Each cell contributes its headline label."""
        assert per_prompt_labels(grid) == {
            "p1": {"claude-opus-4-6": ETHEREUM_ECOSYSTEM, "gpt-5.2": "Solana"},
            "p2": {"claude-opus-4-6": ETHEREUM_ECOSYSTEM, "gpt-5.2": "Solana"},
        }

    def test_empty_grid(self) -> None:
        """Empty grids reduce to empty structures."""
        empty = Grid()

        assert overall_distribution(empty) == {}
        assert per_model_distribution(empty) == []
        assert per_category_distribution(empty) == {}
        assert default_label_summary(empty) == []


class TestDefaultLabelSummary:
    """Tests for default_label_summary."""

    def test_counts_prompts_not_runs(self, grid: Grid) -> None:
        """Each prompt counts once with its headline label."""
        summaries = default_label_summary(grid)

        assert [(s.model.id, s.label, s.times_chosen) for s in summaries] == [
            ("claude-opus-4-6", ETHEREUM_ECOSYSTEM, "2/2"),
            ("gpt-5.2", "Solana", "2/2"),
        ]

    def test_to_dict(self, grid: Grid) -> None:
        """Serialized summaries carry the display name and tier."""
        data = default_label_summary(grid)[1].to_dict()

        assert data == {
            "model": "gpt-5.2",
            "displayName": "GPT-5.2",
            "tier": "flagship",
            "label": "Solana",
            "timesChosen": "2/2",
        }


class TestLatencyPerModel:
    """Tests for latency_per_model."""

    def test_mean_of_cells(self, grid: Grid) -> None:
        """Latency is the rounded mean of cell latencies."""
        rows = latency_per_model(grid)

        # claude: cells (1000+3000)/2=2000 and 1000 -> 1500
        assert [(model.id, ms) for model, ms in rows] == [
            ("claude-opus-4-6", 1500),
            ("gpt-5.2", 1000),
        ]


class TestToolFrequency:
    """Tests for tool_frequency."""

    def test_counts_once_per_result(self) -> None:
        """A tool counts once per result, however often it matched."""
        hardhat = EvidenceItem(label="Hardhat", match_count=4, weight=7, generic=True)
        viem = EvidenceItem(label="viem", match_count=1, weight=6, generic=True)
        chain = EvidenceItem(label="chainId 8453", match_count=1, weight=10)
        results = [
            make_result(evidence=[hardhat, chain]),
            make_result(evidence=[hardhat, viem]),
        ]

        assert tool_frequency(results) == {"Hardhat": 2, "viem": 1}

    def test_result_distribution_tools(self) -> None:
        """The tools field delegates to tool_frequency."""
        hardhat = EvidenceItem(label="Hardhat", match_count=1, weight=7, generic=True)

        assert result_distribution([make_result(evidence=[hardhat])], "tools") == {
            "Hardhat": 1
        }


class TestComparison:
    """Tests for compute_comparison and compare_result_sets."""

    def test_share_delta_in_percentage_points(self) -> None:
        """Shares are normalized per set before taking the delta."""
        rows = compute_comparison(
            {ETHEREUM_ECOSYSTEM: 10, "Solana": 10},
            {ETHEREUM_ECOSYSTEM: 15, "Solana": 5},
        )

        eth = next(row for row in rows if row.label == ETHEREUM_ECOSYSTEM)
        assert eth.base_pct == 50
        assert eth.web_pct == 75
        assert eth.delta_pp == 25

    def test_symmetric(self) -> None:
        """Swapping the sets negates every delta."""
        base = {"Base": 3, "Solana": 1, "Sui": 2}
        web = {"Base": 1, "Solana": 4, "Aptos": 1}

        forward = {row.label: row.delta_pp for row in compute_comparison(base, web)}
        backward = {row.label: row.delta_pp for row in compute_comparison(web, base)}

        assert forward.keys() == backward.keys()
        for label, delta in forward.items():
            assert delta == pytest.approx(-backward[label])

    def test_sorted_by_absolute_delta(self) -> None:
        """The largest shift comes first."""
        rows = compute_comparison({"A": 9, "B": 1}, {"A": 5, "B": 5})

        assert abs(rows[0].delta_pp) >= abs(rows[-1].delta_pp)

    def test_empty_sets(self) -> None:
        """Two empty sets compare to nothing."""
        assert compute_comparison({}, {}) == []

    def test_label_missing_in_one_set(self) -> None:
        """Labels seen in one set only get a zero share in the other."""
        rows = compute_comparison({"Base": 2}, {"TON": 2})

        ton = next(row for row in rows if row.label == "TON")
        assert ton.base_pct == 0
        assert ton.web_pct == 100
        assert ton.to_dict()["deltaPp"] == 100

    def test_compare_result_sets(self) -> None:
        """Flat result sets are counted then compared."""
        base = [make_result(network="Base"), make_result(network="Solana")]
        web = [make_result(network="Solana", web_search=True)]

        rows = compare_result_sets(base, web, "network")

        assert {row.label: row.delta_pp for row in rows} == {
            "Base": -50,
            "Solana": 50,
        }
