"""
Position sizing and stop placement.

Pure functions with no state. Every ratio is guarded: inputs that would
produce NaN or infinity (zero volatility, zero stop distance, zero win/loss
ratio) yield 0 instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.enums import RiskTolerance
from risk.profiles import get_tolerance_limits
from utils.helpers import safe_divide


# =============================================================================
# POSITION SIZING
# =============================================================================

def kelly_fraction(
    win_rate: float,
    win_loss_ratio: float,
) -> float:
    """
    Kelly criterion bet fraction.

    Kelly formula: f* = (p * b - q) / b
    where p = win rate, q = 1 - p, b = average win / average loss

    Args:
        win_rate: Probability of winning
        win_loss_ratio: Average win / average loss

    Returns:
        Fraction of capital to risk; 0 when the ratio is not positive
    """
    if win_loss_ratio <= 0:
        return 0.0

    q = 1 - win_rate
    return (win_rate * win_loss_ratio - q) / win_loss_ratio


def volatility_adjustment(
    volatility: float,
    target_volatility: float = 0.2,
) -> float:
    """Scale factor ``min(1, target / volatility)``; 0 for non-positive volatility."""
    if volatility <= 0:
        return 0.0
    return min(1.0, target_volatility / volatility)


def optimal_position_size(
    account_balance: float,
    risk_per_trade_pct: float,
    stop_loss_distance: float,
    volatility: float,
    win_rate: float,
    avg_win_loss_ratio: float,
) -> float:
    """
    Optimal position size in currency units.

    The smaller of a risk-budget size (scaled down for volatile assets) and
    the Kelly allocation.

    Args:
        account_balance: Account equity
        risk_per_trade_pct: Percent of equity at risk per trade
        stop_loss_distance: Loss per unit of position if the stop is hit
        volatility: Annualized asset volatility
        win_rate: Historical win rate
        avg_win_loss_ratio: Average win / average loss

    Returns:
        Position size, never negative
    """
    risk_amount = account_balance * risk_per_trade_pct / 100
    risk_based_size = safe_divide(risk_amount, stop_loss_distance) if stop_loss_distance > 0 else 0.0

    sized = risk_based_size * volatility_adjustment(volatility)
    kelly_cap = account_balance * kelly_fraction(win_rate, avg_win_loss_ratio)

    return max(0.0, min(sized, kelly_cap))


# =============================================================================
# STOPS
# =============================================================================

def estimate_atr(
    entry_price: float,
    volatility: float,
    atr_factor: float = 0.1,
) -> float:
    """Average True Range proxy: ``entry_price * volatility * atr_factor``."""
    return entry_price * volatility * atr_factor


def stop_loss_price(
    entry_price: float,
    volatility: float,
    tolerance: RiskTolerance | str = RiskTolerance.MODERATE,
) -> float:
    """
    Long stop-loss price.

    ``entry - atr * multiplier`` with multiplier 1.5 / 2.0 / 3.0 for
    low / medium / high risk tolerance.
    """
    multiplier = get_tolerance_limits(tolerance).stop_multiplier
    return entry_price - estimate_atr(entry_price, volatility) * multiplier


def take_profit_price(
    entry_price: float,
    stop_loss: float,
    risk_reward_ratio: float = 2.0,
) -> float:
    """Long take-profit price: ``entry + (entry - stop) * risk_reward_ratio``."""
    return entry_price + (entry_price - stop_loss) * risk_reward_ratio


@dataclass(frozen=True, slots=True)
class StopLevels:
    """Stop-loss and take-profit around an entry."""
    entry_price: float
    stop_loss: float
    take_profit: float
    atr: float

    @property
    def risk_per_unit(self) -> float:
        return self.entry_price - self.stop_loss

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "entry_price": self.entry_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "atr": self.atr,
        }


def calculate_stop_levels(
    entry_price: float,
    volatility: float,
    tolerance: RiskTolerance | str = RiskTolerance.MODERATE,
    risk_reward_ratio: float = 2.0,
) -> StopLevels:
    """
    Calculate stop-loss and take-profit for a long entry.

    Args:
        entry_price: Entry price
        volatility: Annualized asset volatility
        tolerance: Risk tolerance selecting the ATR multiple
        risk_reward_ratio: Reward per unit of risk

    Returns:
        StopLevels
    """
    stop = stop_loss_price(entry_price, volatility, tolerance)
    return StopLevels(
        entry_price=entry_price,
        stop_loss=stop,
        take_profit=take_profit_price(entry_price, stop, risk_reward_ratio),
        atr=estimate_atr(entry_price, volatility),
    )
