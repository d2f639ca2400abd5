"""
Unit tests for position sizing and stops.
"""

import pytest

from core.enums import RiskTolerance
from risk.manager import RiskConfig, RiskManager
from risk.sizing import (
    calculate_stop_levels,
    estimate_atr,
    kelly_fraction,
    optimal_position_size,
    stop_loss_price,
    take_profit_price,
    volatility_adjustment,
)


class TestPositionSizing:
    """Tests for position sizing."""

    def test_kelly_fraction(self):
        """Test Kelly with a positive edge."""
        assert kelly_fraction(0.55, 2.0) == pytest.approx((0.55 * 2.0 - 0.45) / 2.0)

    def test_kelly_zero_ratio(self):
        assert kelly_fraction(0.6, 0.0) == 0.0
        assert kelly_fraction(0.6, -1.0) == 0.0

    def test_volatility_adjustment(self):
        assert volatility_adjustment(0.4) == pytest.approx(0.5)
        assert volatility_adjustment(0.1) == 1.0
        assert volatility_adjustment(0.0) == 0.0

    def test_risk_budget_binds(self):
        """Test the volatility-scaled risk budget is below the Kelly cap."""
        size = optimal_position_size(
            account_balance=10000.0,
            risk_per_trade_pct=2.0,
            stop_loss_distance=5.0,
            volatility=0.4,
            win_rate=0.55,
            avg_win_loss_ratio=2.0,
        )
        assert size == pytest.approx(200.0 / 5.0 * 0.5)

    def test_kelly_binds(self):
        size = optimal_position_size(
            account_balance=1000.0,
            risk_per_trade_pct=50.0,
            stop_loss_distance=0.01,
            volatility=0.1,
            win_rate=0.6,
            avg_win_loss_ratio=1.0,
        )
        assert size == pytest.approx(1000.0 * 0.2)

    def test_negative_edge_gives_zero(self):
        size = optimal_position_size(10000.0, 2.0, 5.0, 0.4, win_rate=0.2, avg_win_loss_ratio=1.0)
        assert size == 0.0

    @pytest.mark.parametrize("stop, vol", [(0.0, 0.4), (5.0, 0.0), (-1.0, 0.4)])
    def test_degenerate_inputs_give_zero(self, stop, vol):
        size = optimal_position_size(10000.0, 2.0, stop, vol, 0.55, 2.0)
        assert size == 0.0

    def test_manager_uses_configured_risk(self):
        manager = RiskManager(RiskConfig(risk_per_trade_pct=1.0))
        size = manager.calculate_position_size(10000.0, 5.0, 0.4, 0.55, 2.0)

        assert size == pytest.approx(100.0 / 5.0 * 0.5)


class TestStops:
    """Tests for stop-loss and take-profit."""

    def test_atr(self):
        assert estimate_atr(100.0, 0.5) == pytest.approx(5.0)

    @pytest.mark.parametrize(
        "tolerance, expected",
        [
            (RiskTolerance.CONSERVATIVE, 92.5),
            (RiskTolerance.MODERATE, 90.0),
            (RiskTolerance.AGGRESSIVE, 85.0),
            ("low", 92.5),
            ("high", 85.0),
        ],
    )
    def test_stop_loss(self, tolerance, expected):
        assert stop_loss_price(100.0, 0.5, tolerance) == pytest.approx(expected)

    def test_take_profit(self):
        assert take_profit_price(100.0, 90.0) == pytest.approx(120.0)
        assert take_profit_price(100.0, 90.0, risk_reward_ratio=3.0) == pytest.approx(130.0)

    def test_stop_levels(self):
        levels = calculate_stop_levels(100.0, 0.5, "medium")

        assert levels.stop_loss == pytest.approx(90.0)
        assert levels.take_profit == pytest.approx(120.0)
        assert levels.atr == pytest.approx(5.0)
        assert levels.risk_per_unit == pytest.approx(10.0)

    def test_manager_stop_levels(self):
        manager = RiskManager(RiskConfig(tolerance="aggressive", risk_reward_ratio=1.5))
        levels = manager.calculate_stop_levels(entry_price=200.0, volatility=0.5)

        assert levels.stop_loss == pytest.approx(170.0)
        assert levels.take_profit == pytest.approx(245.0)
        assert levels.to_dict()["entry_price"] == 200.0
