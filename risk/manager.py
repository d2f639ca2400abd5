"""
Risk Manager Module
===================

Account-level risk management facade for the Cryptofolio engine.
Combines the metrics engine, alert generation, position sizing and stop
placement behind one object bound to an investor's risk tolerance.

Features:
- Risk metrics snapshot (scores, VaR/CVaR, beta, Sharpe, drawdown)
- Severity-ranked risk alerts, optionally with tolerance-limit checks
- Kelly / volatility-adjusted position sizing
- ATR-style stop-loss and take-profit

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.enums import RiskTolerance
from core.interfaces import RiskProfileProvider
from core.types import AccountSnapshot, AllocatedAsset, RiskAlert, RiskMetrics
from risk.alerts import generate_risk_alerts, sort_alerts, tolerance_alerts
from risk.metrics import RiskMetricsEngine
from risk.profiles import ToleranceLimits, get_tolerance_limits
from risk.sizing import StopLevels, calculate_stop_levels, optimal_position_size
from utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class RiskConfig:
    """
    Risk manager configuration.

    Attributes:
        tolerance: Investor risk tolerance
        risk_per_trade_pct: Percent of equity at risk per trade
        risk_reward_ratio: Take-profit reward per unit of risk
        include_tolerance_alerts: Add tolerance-limit alerts to the fixed table
    """
    tolerance: RiskTolerance = RiskTolerance.MODERATE
    risk_per_trade_pct: float = 2.0
    risk_reward_ratio: float = 2.0
    include_tolerance_alerts: bool = False

    def __post_init__(self) -> None:
        self.tolerance = RiskTolerance(self.tolerance)


# =============================================================================
# RISK MANAGER
# =============================================================================

class RiskManager:
    """
    Account-level risk management.

    Example:
        risk_mgr = RiskManager(RiskConfig(tolerance=RiskTolerance("low")))

        metrics = risk_mgr.calculate_risk_metrics(account)
        alerts = risk_mgr.generate_risk_alerts(account)

        stops = risk_mgr.calculate_stop_levels(entry_price=100.0, volatility=0.7)
    """

    def __init__(
        self,
        config: RiskConfig | None = None,
        profiles: RiskProfileProvider | None = None,
        metrics_engine: RiskMetricsEngine | None = None,
    ):
        """
        Initialize risk manager.

        Args:
            config: Risk configuration
            profiles: Per-asset risk profile provider
            metrics_engine: Metrics calculator (built from ``profiles`` if None)
        """
        self.config = config or RiskConfig()
        self.metrics_engine = metrics_engine or RiskMetricsEngine(profiles=profiles)

        logger.info(f"RiskManager initialized with tolerance={self.config.tolerance.value}")

    @property
    def limits(self) -> ToleranceLimits:
        """Limits of the configured tolerance."""
        return get_tolerance_limits(self.config.tolerance)

    @staticmethod
    def _snapshot(account: AccountSnapshot | dict[str, Any]) -> AccountSnapshot:
        if isinstance(account, AccountSnapshot):
            return account
        return AccountSnapshot.from_dict(account)

    def calculate_risk_metrics(
        self,
        account: AccountSnapshot | dict[str, Any],
    ) -> RiskMetrics:
        """
        Calculate current risk metrics.

        Args:
            account: Account snapshot or plain account mapping

        Returns:
            RiskMetrics record
        """
        return self.metrics_engine.calculate(self._snapshot(account))

    def generate_risk_alerts(
        self,
        account: AccountSnapshot | dict[str, Any],
    ) -> list[RiskAlert]:
        """
        Generate risk alerts for an account.

        Args:
            account: Account snapshot or plain account mapping

        Returns:
            Alerts sorted by severity descending
        """
        snapshot = self._snapshot(account)
        metrics = self.metrics_engine.calculate(snapshot)
        alerts = generate_risk_alerts(metrics)

        if self.config.include_tolerance_alerts:
            alerts = sort_alerts(
                alerts + tolerance_alerts(metrics, snapshot, self.config.tolerance, self.metrics_engine.profiles)
            )

        if alerts:
            logger.info(f"{len(alerts)} risk alert(s), top severity {alerts[0].severity}")

        return alerts

    def asset_risk_score(self, asset: AllocatedAsset) -> float:
        """Per-asset risk score in [0, 1]."""
        return self.metrics_engine.asset_risk_score(asset)

    def calculate_position_size(
        self,
        account_balance: float,
        stop_loss_distance: float,
        volatility: float,
        win_rate: float,
        avg_win_loss_ratio: float,
        risk_per_trade_pct: float | None = None,
    ) -> float:
        """
        Calculate position size in currency units.

        Args:
            account_balance: Account equity
            stop_loss_distance: Loss per unit if the stop is hit
            volatility: Annualized asset volatility
            win_rate: Historical win rate
            avg_win_loss_ratio: Average win / average loss
            risk_per_trade_pct: Override of the configured risk per trade

        Returns:
            Position size, never negative
        """
        risk_pct = self.config.risk_per_trade_pct if risk_per_trade_pct is None else risk_per_trade_pct
        return optimal_position_size(
            account_balance=account_balance,
            risk_per_trade_pct=risk_pct,
            stop_loss_distance=stop_loss_distance,
            volatility=volatility,
            win_rate=win_rate,
            avg_win_loss_ratio=avg_win_loss_ratio,
        )

    def calculate_stop_levels(
        self,
        entry_price: float,
        volatility: float,
    ) -> StopLevels:
        """Stop-loss and take-profit for a long entry at the configured tolerance."""
        return calculate_stop_levels(
            entry_price,
            volatility,
            tolerance=self.config.tolerance,
            risk_reward_ratio=self.config.risk_reward_ratio,
        )


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    "RiskConfig",
    "RiskManager",
]
