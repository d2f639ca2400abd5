"""
Portfolio Optimizer Module
==========================

Target-weight optimization for the risk engine.

The optimizer is a risk-parity heuristic with adjustments:
- Inverse-volatility base weights
- Expected-return tilt (towards a target return when one is given)
- Risk-tolerance tilt and scalar multiplier
- Penalty for assets highly correlated with the rest of the book
- Box constraints followed by renormalization

Analyst views are blended into expected returns beforehand
(Black-Litterman style shrinkage).

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from config import settings
from core.enums import RiskTolerance
from core.interfaces import CorrelationModel
from core.types import (
    AnalystView,
    Asset,
    OptimizationResult,
    PortfolioRiskSummary,
    ValidationError,
)
from core.validation import validate_assets, validate_correlation_matrix
from portfolio.construction import (
    asset_arrays,
    construct_portfolio,
    portfolio_return,
    portfolio_volatility,
)
from portfolio.correlation import HeuristicCorrelationModel, is_crypto
from portfolio.rebalancer import Rebalancer
from risk.profiles import get_tolerance_limits
from utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class OptimizationConfig:
    """
    Weight optimizer configuration.

    Attributes:
        min_weight: Minimum weight per asset before renormalization
        max_weight: Maximum weight per asset before renormalization
        correlation_penalty: Weight reduction per unit of mean |correlation|
        return_adjustment_floor: Floor of the target-return tilt
        aggressive_volatility_boost: Volatility multiple favored by aggressive profiles
        risk_free_rate: Annual risk-free rate
        var_z: z-score of the return-space VaR
        cvar_z: z-score of the return-space CVaR
        crypto_liquidity_risk: Liquidity penalty of crypto assets
        other_liquidity_risk: Liquidity penalty of other assets
    """
    min_weight: float = 0.05
    max_weight: float = 0.40
    correlation_penalty: float = 0.3
    return_adjustment_floor: float = 0.1
    aggressive_volatility_boost: float = 1.2
    risk_free_rate: float = 0.02
    var_z: float = 1.645
    cvar_z: float = 2.33
    crypto_liquidity_risk: float = 0.7
    other_liquidity_risk: float = 0.3

    @classmethod
    def from_settings(cls) -> "OptimizationConfig":
        """Build a configuration from the global settings."""
        cfg = settings.optimizer
        return cls(
            min_weight=cfg.min_weight,
            max_weight=cfg.max_weight,
            correlation_penalty=cfg.correlation_penalty,
            return_adjustment_floor=cfg.return_adjustment_floor,
            aggressive_volatility_boost=cfg.aggressive_volatility_boost,
            risk_free_rate=cfg.risk_free_rate,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def apply_views(
    assets: Sequence[Asset],
    views: Sequence[AnalystView],
) -> list[Asset]:
    """
    Blend analyst views into expected returns.

    ``blended = base * (1 - confidence) + view * confidence``

    Args:
        assets: Assets carrying baseline expected returns
        views: Analyst views; views for unknown symbols are ignored

    Returns:
        New asset list with blended expected returns
    """
    by_symbol = {}
    for view in views:
        if not 0.0 <= view.confidence <= 1.0:
            raise ValidationError(
                f"{view.symbol}: view confidence must be in [0, 1], got {view.confidence}"
            )
        by_symbol[view.symbol] = view

    known = {asset.symbol for asset in assets}
    unknown = sorted(set(by_symbol) - known)
    if unknown:
        logger.warning(f"Ignoring views for assets not in portfolio: {unknown}")

    blended = []
    for asset in assets:
        view = by_symbol.get(asset.symbol)
        if view is None:
            blended.append(asset)
            continue
        er = asset.expected_return * (1 - view.confidence) + view.expected_return * view.confidence
        blended.append(asset.with_expected_return(er))

    return blended


def inverse_volatility_weights(
    volatilities: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Inverse volatility weights.

    Lower volatility assets get higher weights. Volatilities must be
    strictly positive.
    """
    inv_vol = 1.0 / volatilities
    return inv_vol / np.sum(inv_vol)


def return_adjustment(
    expected_returns: NDArray[np.float64],
    target_return: float | None = None,
    floor: float = 0.1,
) -> NDArray[np.float64]:
    """
    Expected-return tilt.

    With a target return the tilt is ``er / target`` floored at ``floor``;
    without one it is ``(er + 1) / 2``. A zero target counts as no target.
    """
    if target_return:
        return np.maximum(floor, expected_returns / target_return)
    return (expected_returns + 1) / 2


def risk_adjustment(
    volatilities: NDArray[np.float64],
    tolerance: RiskTolerance,
    aggressive_boost: float = 1.2,
) -> NDArray[np.float64]:
    """Risk-tolerance tilt per asset."""
    if tolerance == RiskTolerance.CONSERVATIVE:
        return np.minimum(1.0, 1.0 / volatilities)
    if tolerance == RiskTolerance.AGGRESSIVE:
        return np.maximum(1.0, volatilities * aggressive_boost)
    return np.ones_like(volatilities)


def correlation_penalty(
    correlation_matrix: NDArray[np.float64],
    strength: float = 0.3,
) -> NDArray[np.float64]:
    """
    Penalty for assets correlated with the rest of the book.

    ``1 - strength * mean(|corr to every other asset|)``; a lone asset
    is not penalized.
    """
    n = correlation_matrix.shape[0]
    if n < 2:
        return np.ones(n)

    abs_corr = np.abs(correlation_matrix)
    off_diagonal = abs_corr.sum(axis=1) - np.diag(abs_corr)
    return 1 - strength * off_diagonal / (n - 1)


# =============================================================================
# OPTIMIZATION FUNCTIONS
# =============================================================================

def calculate_optimal_weights(
    assets: Sequence[Asset],
    correlation_matrix: NDArray[np.float64],
    tolerance: RiskTolerance | str = RiskTolerance.MODERATE,
    target_return: float | None = None,
    config: OptimizationConfig | None = None,
) -> list[Asset]:
    """
    Calculate target weights.

    Args:
        assets: Candidate assets (volatility must be > 0)
        correlation_matrix: Correlation matrix ordered like ``assets``
        tolerance: Risk tolerance
        target_return: Optional target annual return
        config: Optimizer configuration

    Returns:
        New asset list whose weights sum to 1
    """
    config = config or OptimizationConfig.from_settings()
    tolerance = RiskTolerance(tolerance)

    if not assets:
        return []

    validate_assets(assets, require_positive_volatility=True)
    validate_correlation_matrix(correlation_matrix, size=len(assets))

    _, expected_returns, volatilities = asset_arrays(assets)
    multiplier = get_tolerance_limits(tolerance).risk_multiplier

    weights = (
        inverse_volatility_weights(volatilities)
        * return_adjustment(expected_returns, target_return, config.return_adjustment_floor)
        * risk_adjustment(volatilities, tolerance, config.aggressive_volatility_boost)
        * correlation_penalty(correlation_matrix, config.correlation_penalty)
        * multiplier
    )

    # Box constraints, then normalize. The renormalized weights may leave
    # the box slightly; they are not clipped again.
    weights = np.clip(weights, config.min_weight, config.max_weight)
    weights = weights / np.sum(weights)

    return [asset.with_weight(float(w)) for asset, w in zip(assets, weights)]


def risk_summary(
    assets: Sequence[Asset],
    correlation_matrix: NDArray[np.float64],
    config: OptimizationConfig | None = None,
) -> PortfolioRiskSummary:
    """
    Summarize the risk of a weighted asset list.

    Args:
        assets: Weighted assets
        correlation_matrix: Correlation matrix ordered like ``assets``
        config: Optimizer configuration

    Returns:
        Return-space VaR/CVaR, Herfindahl concentration and liquidity risk
    """
    config = config or OptimizationConfig.from_settings()
    weights, expected_returns, volatilities = asset_arrays(assets)

    port_return = portfolio_return(weights, expected_returns)
    port_vol = portfolio_volatility(weights, volatilities, correlation_matrix)

    liquidity = np.array([
        config.crypto_liquidity_risk if is_crypto(a.symbol) else config.other_liquidity_risk
        for a in assets
    ])

    return PortfolioRiskSummary(
        var_95=port_return - config.var_z * port_vol,
        cvar=port_return - config.cvar_z * port_vol,
        concentration=float(np.sum(weights ** 2)),
        liquidity_risk=float(np.dot(weights, liquidity)) if len(assets) else 0.0,
        correlation_matrix=correlation_matrix,
    )


# =============================================================================
# PORTFOLIO OPTIMIZER CLASS
# =============================================================================

class PortfolioOptimizer:
    """
    Portfolio optimization engine.

    Stateless: every call estimates a fresh correlation matrix and returns
    new objects.

    Example:
        optimizer = PortfolioOptimizer()

        result = optimizer.optimize_portfolio(assets, tolerance="aggressive")
        print(result.portfolio.weights)

        for rec in result.rebalance_recommendations:
            print(rec.symbol, rec.action, rec.amount)
    """

    def __init__(
        self,
        config: OptimizationConfig | None = None,
        correlation_model: CorrelationModel | None = None,
        rebalancer: Rebalancer | None = None,
    ):
        """
        Initialize optimizer.

        Args:
            config: Optimization configuration
            correlation_model: Correlation estimator (None = heuristic model)
            rebalancer: Rebalance recommender
        """
        self.config = config or OptimizationConfig.from_settings()
        self.correlation_model = correlation_model or HeuristicCorrelationModel()
        self.rebalancer = rebalancer or Rebalancer()

    def calculate_optimal_weights(
        self,
        assets: Sequence[Asset],
        target_return: float | None = None,
        tolerance: RiskTolerance | str = RiskTolerance.MODERATE,
        views: Sequence[AnalystView] | None = None,
    ) -> list[Asset]:
        """
        Calculate target weights only.

        Args:
            assets: Candidate assets
            target_return: Optional target annual return
            tolerance: Risk tolerance
            views: Optional analyst views

        Returns:
            New asset list carrying target weights
        """
        if views:
            assets = apply_views(assets, views)
        matrix = self.correlation_model.estimate(assets)
        return calculate_optimal_weights(assets, matrix, tolerance, target_return, self.config)

    def optimize_portfolio(
        self,
        assets: Sequence[Asset],
        target_return: float | None = None,
        tolerance: RiskTolerance | str = RiskTolerance.MODERATE,
        views: Sequence[AnalystView] | None = None,
    ) -> OptimizationResult:
        """
        Optimize, construct, and diff against current weights.

        Args:
            assets: Assets carrying current weights
            target_return: Optional target annual return
            tolerance: Risk tolerance
            views: Optional analyst views

        Returns:
            OptimizationResult with portfolio, recommendations and risk summary
        """
        tolerance = RiskTolerance(tolerance)
        candidates = apply_views(assets, views) if views else list(assets)

        validate_assets(candidates, require_positive_volatility=True)
        matrix = self.correlation_model.estimate(candidates)

        optimized = calculate_optimal_weights(
            candidates, matrix, tolerance, target_return, self.config
        )
        portfolio = construct_portfolio(optimized, matrix, risk_free_rate=self.config.risk_free_rate)
        recommendations = self.rebalancer.recommend(assets, optimized)
        summary = risk_summary(optimized, matrix, self.config)

        logger.info(
            f"Optimized portfolio: {tolerance.value}, "
            f"Return={portfolio.expected_return:.2%}, Vol={portfolio.volatility:.2%}, "
            f"Sharpe={portfolio.sharpe_ratio:.2f}, trades={len(recommendations)}"
        )

        return OptimizationResult(
            portfolio=portfolio,
            rebalance_recommendations=recommendations,
            risk_summary=summary,
        )

    def black_litterman_optimization(
        self,
        assets: Sequence[Asset],
        views: Sequence[AnalystView],
        tolerance: RiskTolerance | str = RiskTolerance.MODERATE,
    ) -> list[Asset]:
        """
        Blend analyst views into expected returns, then optimize weights.

        Args:
            assets: Candidate assets
            views: Analyst views
            tolerance: Risk tolerance

        Returns:
            New asset list with blended returns and target weights
        """
        return self.calculate_optimal_weights(assets, tolerance=tolerance, views=views)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Classes
    "OptimizationConfig",
    "PortfolioOptimizer",
    # Functions
    "apply_views",
    "inverse_volatility_weights",
    "return_adjustment",
    "risk_adjustment",
    "correlation_penalty",
    "calculate_optimal_weights",
    "risk_summary",
]
