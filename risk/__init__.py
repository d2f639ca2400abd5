"""
Risk Module
===========

Account-level risk management for the Cryptofolio engine.
Provides risk metrics, alerts, position sizing and stop placement.

Components:
- profiles: asset risk profiles and tolerance limits
- metrics: risk metrics engine
- alerts: threshold alerts
- sizing: position sizing and stops
- manager: facade bound to a risk tolerance

Author: Cryptofolio
License: MIT
"""

from risk.profiles import (
    ToleranceLimits,
    StaticRiskProfileProvider,
    get_tolerance_limits,
)
from risk.metrics import (
    RiskMetricsEngine,
    parametric_var,
    parametric_cvar,
)
from risk.alerts import (
    AlertRule,
    generate_risk_alerts,
    tolerance_alerts,
)
from risk.sizing import (
    StopLevels,
    kelly_fraction,
    optimal_position_size,
    estimate_atr,
    stop_loss_price,
    take_profit_price,
    calculate_stop_levels,
)
from risk.manager import (
    RiskConfig,
    RiskManager,
)

__all__ = [
    # Profiles
    "ToleranceLimits",
    "StaticRiskProfileProvider",
    "get_tolerance_limits",
    # Metrics
    "RiskMetricsEngine",
    "parametric_var",
    "parametric_cvar",
    # Alerts
    "AlertRule",
    "generate_risk_alerts",
    "tolerance_alerts",
    # Sizing
    "StopLevels",
    "kelly_fraction",
    "optimal_position_size",
    "estimate_atr",
    "stop_loss_price",
    "take_profit_price",
    "calculate_stop_levels",
    # Manager
    "RiskConfig",
    "RiskManager",
]
