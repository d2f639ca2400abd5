"""
Risk alert generation.

Thresholds are evaluated independently, so one snapshot can raise several
alerts. Alerts are returned most severe first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from config import settings
from core.enums import AlertType, RiskTolerance
from core.interfaces import RiskProfileProvider
from core.types import AccountSnapshot, RiskAlert, RiskMetrics
from risk.profiles import StaticRiskProfileProvider, get_tolerance_limits
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AlertRule:
    """One threshold check against a RiskMetrics field."""
    metric: str
    threshold: float
    above: bool
    type: AlertType
    severity: int
    message: str
    action: str

    def breached(self, value: float) -> bool:
        return value > self.threshold if self.above else value < self.threshold


def default_alert_rules() -> tuple[AlertRule, ...]:
    """Fixed alert table with thresholds from settings."""
    cfg = settings.risk
    return (
        AlertRule(
            metric="concentration_risk",
            threshold=cfg.concentration_alert,
            above=True,
            type=AlertType.CRITICAL,
            severity=9,
            message="Portfolio is too concentrated in a few assets",
            action="Rebalance to diversify holdings",
        ),
        AlertRule(
            metric="volatility_score",
            threshold=cfg.volatility_alert,
            above=True,
            type=AlertType.WARNING,
            severity=7,
            message="Portfolio volatility is high",
            action="Consider reducing exposure to volatile assets",
        ),
        AlertRule(
            metric="current_drawdown",
            threshold=cfg.drawdown_alert,
            above=True,
            type=AlertType.CRITICAL,
            severity=10,
            message=f"Portfolio drawdown exceeds {cfg.drawdown_alert:.0%}",
            action="Review risk management strategy",
        ),
        AlertRule(
            metric="liquidity_score",
            threshold=cfg.liquidity_alert,
            above=False,
            type=AlertType.WARNING,
            severity=6,
            message="Portfolio liquidity is low",
            action="Shift allocation towards more liquid assets",
        ),
    )


def sort_alerts(alerts: Sequence[RiskAlert]) -> list[RiskAlert]:
    """Order alerts by severity, most severe first (stable)."""
    return sorted(alerts, key=lambda a: a.severity, reverse=True)


def generate_risk_alerts(
    metrics: RiskMetrics,
    rules: Sequence[AlertRule] | None = None,
) -> list[RiskAlert]:
    """
    Threshold risk metrics into alerts.

    Args:
        metrics: Risk metrics snapshot
        rules: Alert rules (None = fixed default table)

    Returns:
        Alerts sorted by severity descending
    """
    rules = default_alert_rules() if rules is None else rules
    alerts = []

    for rule in rules:
        value = getattr(metrics, rule.metric)
        if rule.breached(value):
            alerts.append(
                RiskAlert(
                    type=rule.type,
                    message=rule.message,
                    action=rule.action,
                    severity=rule.severity,
                    metric=rule.metric,
                    value=value,
                )
            )

    for alert in alerts:
        logger.warning(f"RISK | {alert.type.value} | {alert.metric}={alert.value:.2f} | {alert.message}")

    return sort_alerts(alerts)


def tolerance_alerts(
    metrics: RiskMetrics,
    account: AccountSnapshot,
    tolerance: RiskTolerance | str,
    profiles: RiskProfileProvider | None = None,
) -> list[RiskAlert]:
    """
    Check a snapshot against the limits of a risk tolerance.

    Args:
        metrics: Risk metrics of ``account``
        account: Account snapshot
        tolerance: Investor risk tolerance
        profiles: Profile source used to classify volatile assets

    Returns:
        Alerts sorted by severity descending
    """
    tolerance = RiskTolerance(tolerance)
    limits = get_tolerance_limits(tolerance)
    profiles = profiles or StaticRiskProfileProvider()
    threshold = settings.risk.volatile_asset_threshold
    alerts = []

    largest = metrics.concentration_risk / 100
    if largest > limits.max_single_asset_allocation:
        top = max(account.assets, key=lambda a: a.allocation)
        alerts.append(
            RiskAlert(
                type=AlertType.WARNING,
                message=(
                    f"{top.symbol} allocation {largest:.0%} exceeds the "
                    f"{limits.max_single_asset_allocation:.0%} limit for {tolerance.value} investors"
                ),
                action=f"Reduce {top.symbol} exposure",
                severity=5,
                metric="concentration_risk",
                value=metrics.concentration_risk,
                metadata={"symbol": top.symbol, "limit": limits.max_single_asset_allocation},
            )
        )

    if metrics.current_drawdown > limits.max_drawdown:
        alerts.append(
            RiskAlert(
                type=AlertType.WARNING,
                message=(
                    f"Drawdown {metrics.current_drawdown:.1%} exceeds the "
                    f"{limits.max_drawdown:.0%} tolerance"
                ),
                action="Cut position sizes until drawdown recovers",
                severity=8,
                metric="current_drawdown",
                value=metrics.current_drawdown,
                metadata={"limit": limits.max_drawdown},
            )
        )

    volatile = [a for a in account.assets if profiles.profile(a.symbol).volatility >= threshold]
    volatile_share = sum(a.allocation for a in volatile) / 100
    if volatile_share > limits.max_volatile_asset_allocation:
        symbols = [a.symbol for a in volatile]
        alerts.append(
            RiskAlert(
                type=AlertType.WARNING,
                message=(
                    f"Volatile assets hold {volatile_share:.0%}, above the "
                    f"{limits.max_volatile_asset_allocation:.0%} limit for {tolerance.value} investors"
                ),
                action=f"Rotate part of {', '.join(symbols)} into lower-volatility assets",
                severity=4,
                metric="volatile_allocation",
                value=volatile_share,
                metadata={"symbols": symbols, "limit": limits.max_volatile_asset_allocation},
            )
        )

    if account.assets and metrics.sharpe_ratio < limits.sharpe_ratio_threshold:
        alerts.append(
            RiskAlert(
                type=AlertType.INFO,
                message=(
                    f"Sharpe ratio {metrics.sharpe_ratio:.2f} is below "
                    f"{limits.sharpe_ratio_threshold:.2f}"
                ),
                action="Review risk-adjusted returns of current holdings",
                severity=3,
                metric="sharpe_ratio",
                value=metrics.sharpe_ratio,
                metadata={"limit": limits.sharpe_ratio_threshold},
            )
        )

    return sort_alerts(alerts)
