"""
Core Types Module
=================

Core data structures and exceptions for the portfolio risk engine.

Every structure here is a value: the optimizer and risk engine never mutate
their inputs and always hand back fresh instances.

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np
from numpy.typing import NDArray

from core.enums import AlertType, RebalanceAction, RebalancePriority


# =============================================================================
# EXCEPTIONS
# =============================================================================

class RiskEngineError(Exception):
    """Base exception for all risk engine errors."""
    pass


class ValidationError(RiskEngineError):
    """Caller contract violation detected at the boundary."""
    pass


class AssetValidationError(ValidationError):
    """Asset has a negative volatility or an out-of-range weight."""
    pass


class CorrelationMatrixError(ValidationError):
    """Correlation matrix is not square, symmetric or unit-diagonal."""
    pass


class WeightNormalizationError(ValidationError):
    """Weights do not sum to one."""
    pass


class SimulationConfigError(RiskEngineError, ValueError):
    """Invalid Monte Carlo parameters."""
    pass


class ConfigurationError(RiskEngineError):
    """Configuration error."""
    pass


# =============================================================================
# PORTFOLIO INPUTS
# =============================================================================

@dataclass(frozen=True, slots=True)
class Asset:
    """One holding or candidate holding."""
    symbol: str
    name: str
    weight: float
    expected_return: float
    volatility: float
    price: float

    def with_weight(self, weight: float) -> "Asset":
        """Return a copy carrying a new weight."""
        return replace(self, weight=weight)

    def with_expected_return(self, expected_return: float) -> "Asset":
        """Return a copy carrying a new expected return."""
        return replace(self, expected_return=expected_return)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "weight": self.weight,
            "expected_return": self.expected_return,
            "volatility": self.volatility,
            "price": self.price,
        }


@dataclass(frozen=True, slots=True)
class AnalystView:
    """Subjective expected return for one asset, weighted by confidence."""
    symbol: str
    expected_return: float
    confidence: float


@dataclass(frozen=True, slots=True)
class AssetRiskProfile:
    """Per-asset volatility, market correlation and liquidity scores (0-1)."""
    volatility: float
    correlation: float
    liquidity: float


@dataclass(frozen=True, slots=True)
class AllocatedAsset:
    """
    Account holding as seen by the risk engine.

    Attributes:
        symbol: Profile key (``bitcoin``) or ticker (``BTC``)
        allocation: Share of the account in percent (0-100)
        value: Market value in account currency
    """
    symbol: str
    allocation: float
    value: float


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """Cash balance plus allocated assets."""
    balance: float
    assets: tuple[AllocatedAsset, ...] = ()
    initial_balance: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountSnapshot":
        """
        Build a snapshot from a plain account mapping.

        Assets are keyed by ``coin_id`` when present, else ``symbol``.
        """
        assets = tuple(
            AllocatedAsset(
                symbol=item.get("coin_id") or item["symbol"],
                allocation=float(item.get("allocation", 0.0)),
                value=float(item.get("value", 0.0)),
            )
            for item in data.get("assets") or ()
        )
        initial = data.get("initial_balance")
        return cls(
            balance=float(data.get("balance", 0.0)),
            assets=assets,
            initial_balance=float(initial) if initial is not None else None,
        )

    @property
    def holdings_value(self) -> float:
        return sum(asset.value for asset in self.assets)

    @property
    def total_value(self) -> float:
        return self.holdings_value + self.balance


# =============================================================================
# OPTIMIZER OUTPUTS
# =============================================================================

@dataclass(slots=True)
class Portfolio:
    """Aggregate statistics of a weighted asset list."""
    assets: list[Asset]
    total_value: float
    expected_return: float
    volatility: float
    sharpe_ratio: float
    max_drawdown: float

    @property
    def weights(self) -> dict[str, float]:
        return {asset.symbol: asset.weight for asset in self.assets}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "assets": [asset.to_dict() for asset in self.assets],
            "total_value": self.total_value,
            "expected_return": self.expected_return,
            "volatility": self.volatility,
            "sharpe_ratio": self.sharpe_ratio,
            "max_drawdown": self.max_drawdown,
        }


@dataclass(frozen=True, slots=True)
class RebalanceRecommendation:
    """Suggested trade moving one asset toward its target weight."""
    symbol: str
    current_weight: float
    target_weight: float
    action: RebalanceAction
    amount: float
    priority: RebalancePriority

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "symbol": self.symbol,
            "current_weight": self.current_weight,
            "target_weight": self.target_weight,
            "action": self.action.value,
            "amount": self.amount,
            "priority": self.priority.value,
        }


@dataclass(slots=True)
class PortfolioRiskSummary:
    """
    Risk summary of an optimized weight set.

    Attributes:
        var_95: Return-space 95% VaR (expected return minus 1.645 sigma)
        cvar: Return-space conditional VaR (expected return minus 2.33 sigma)
        concentration: Herfindahl index of the weights
        liquidity_risk: Weighted liquidity penalty
        correlation_matrix: Matrix used for the volatility estimate
    """
    var_95: float
    cvar: float
    concentration: float
    liquidity_risk: float
    correlation_matrix: NDArray[np.float64]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "var_95": self.var_95,
            "cvar": self.cvar,
            "concentration": self.concentration,
            "liquidity_risk": self.liquidity_risk,
            "correlation_matrix": self.correlation_matrix.tolist(),
        }


@dataclass(slots=True)
class OptimizationResult:
    """Result of a full optimization run."""
    portfolio: Portfolio
    rebalance_recommendations: list[RebalanceRecommendation]
    risk_summary: PortfolioRiskSummary

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "portfolio": self.portfolio.to_dict(),
            "rebalance_recommendations": [
                rec.to_dict() for rec in self.rebalance_recommendations
            ],
            "risk_summary": self.risk_summary.to_dict(),
        }


# =============================================================================
# RISK ENGINE OUTPUTS
# =============================================================================

@dataclass(slots=True)
class RiskMetrics:
    """
    Account-level risk metrics snapshot.

    Scores are on a 0-100 scale; drawdown is a fraction; VaR and CVaR are
    in account currency.
    """
    overall_risk_score: float = 0.0
    diversification_score: float = 0.0
    volatility_score: float = 0.0
    liquidity_score: float = 100.0
    concentration_risk: float = 0.0
    correlation_risk: float = 0.0
    portfolio_value: float = 0.0
    portfolio_volatility: float = 0.0
    expected_return: float = 0.0
    current_drawdown: float = 0.0
    portfolio_var: float = 0.0
    portfolio_cvar: float = 0.0
    beta: float = 1.0
    sharpe_ratio: float = 0.0
    diversification_ratio: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "overall_risk_score": self.overall_risk_score,
            "diversification_score": self.diversification_score,
            "volatility_score": self.volatility_score,
            "liquidity_score": self.liquidity_score,
            "concentration_risk": self.concentration_risk,
            "correlation_risk": self.correlation_risk,
            "portfolio_value": self.portfolio_value,
            "portfolio_volatility": self.portfolio_volatility,
            "expected_return": self.expected_return,
            "current_drawdown": self.current_drawdown,
            "portfolio_var": self.portfolio_var,
            "portfolio_cvar": self.portfolio_cvar,
            "beta": self.beta,
            "sharpe_ratio": self.sharpe_ratio,
            "diversification_ratio": self.diversification_ratio,
        }


@dataclass(frozen=True, slots=True)
class RiskAlert:
    """Human-readable risk alert."""
    type: AlertType
    message: str
    action: str
    severity: int
    metric: str = ""
    value: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "message": self.message,
            "action": self.action,
            "severity": self.severity,
            "metric": self.metric,
            "value": self.value,
            "metadata": self.metadata,
        }
