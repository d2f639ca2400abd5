"""
Unit tests for rebalance recommendations.
"""

import pytest

from core.enums import RebalanceAction, RebalancePriority
from core.types import Asset, WeightNormalizationError
from portfolio.rebalancer import Rebalancer, generate_rebalance_recommendations


def _assets(weights: dict[str, float]) -> list[Asset]:
    return [Asset(symbol, symbol, w, 0.1, 0.5, 1.0) for symbol, w in weights.items()]


class TestRebalancer:
    """Tests for the drift-based recommender."""

    def test_priority_order(self):
        """Test high before medium before low."""
        current = _assets({"A": 0.10, "B": 0.50, "C": 0.40})
        target = _assets({"A": 0.22, "B": 0.30, "C": 0.48})

        recs = Rebalancer().recommend(current, target)

        assert [r.symbol for r in recs] == ["B", "A", "C"]
        assert [r.priority for r in recs] == [
            RebalancePriority.HIGH,
            RebalancePriority.MEDIUM,
            RebalancePriority.LOW,
        ]

    def test_actions_and_amounts(self):
        current = _assets({"A": 0.10, "B": 0.50, "C": 0.40})
        target = _assets({"A": 0.22, "B": 0.30, "C": 0.48})

        recs = {r.symbol: r for r in Rebalancer().recommend(current, target)}

        assert recs["A"].action == RebalanceAction.BUY
        assert recs["B"].action == RebalanceAction.SELL
        assert recs["B"].amount == pytest.approx(0.20)
        assert recs["B"].current_weight == 0.50
        assert recs["B"].target_weight == 0.30

    def test_small_drift_ignored(self):
        current = _assets({"A": 0.50, "B": 0.50})
        target = _assets({"A": 0.52, "B": 0.48})

        assert Rebalancer().recommend(current, target) == []

    def test_drift_at_threshold_emitted(self):
        """Test a drift exactly at the materiality threshold is not ignored."""
        current = _assets({"A": 0.25, "B": 0.75})
        target = _assets({"A": 0.3125, "B": 0.6875})

        recs = Rebalancer(materiality_threshold=0.0625).recommend(current, target)

        assert len(recs) == 2
        assert all(r.priority == RebalancePriority.LOW for r in recs)

    def test_stable_within_priority(self):
        """Test equal priorities keep input order."""
        current = _assets({"A": 0.30, "B": 0.30, "C": 0.40})
        target = _assets({"A": 0.50, "B": 0.10, "C": 0.40})

        recs = Rebalancer().recommend(current, target)

        assert [r.symbol for r in recs] == ["A", "B"]

    def test_already_balanced(self, sample_assets):
        assert Rebalancer().recommend(sample_assets, sample_assets) == []

    def test_target_weights_must_sum_to_one(self):
        current = _assets({"A": 0.5, "B": 0.5})
        target = _assets({"A": 0.5, "B": 0.3})

        with pytest.raises(WeightNormalizationError):
            Rebalancer().recommend(current, target)

    def test_missing_target_skipped(self):
        current = _assets({"A": 0.5, "B": 0.5})
        target = _assets({"A": 1.0})

        recs = Rebalancer().recommend(current, target)

        assert [r.symbol for r in recs] == ["A"]

    def test_module_function(self):
        current = _assets({"A": 0.10, "B": 0.90})
        target = _assets({"A": 0.50, "B": 0.50})

        recs = generate_rebalance_recommendations(current, target)

        assert len(recs) == 2
        assert recs[0].to_dict()["priority"] == "high"
