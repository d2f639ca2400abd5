"""
Risk Metrics Module
===================

Account-level risk metrics computed from a snapshot of allocated assets and
a per-asset risk profile table.

Metrics:
- Diversification, volatility, liquidity scores (0-100)
- Concentration and correlation risk (0-100)
- Overall weighted risk score
- Current drawdown against the initial balance
- Parametric VaR and CVaR in account currency
- Beta against a reference market volatility
- Sharpe ratio and diversification ratio

Empty and single-asset accounts are valid inputs with defined defaults.

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import stats as scipy_stats

from config import settings
from core.interfaces import RiskProfileProvider
from core.types import AccountSnapshot, AllocatedAsset, AssetRiskProfile, RiskMetrics
from risk.profiles import StaticRiskProfileProvider
from utils.helpers import clamp, safe_divide
from utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# PARAMETRIC VAR
# =============================================================================

def z_score(confidence: float) -> float:
    """One-tailed normal z-score for a confidence level (1.645 at 95%)."""
    if confidence == 0.95:
        return 1.645
    if confidence == 0.99:
        return 2.33
    return float(scipy_stats.norm.ppf(confidence))


def parametric_var(
    volatility: float,
    value: float,
    confidence: float = 0.95,
) -> float:
    """
    Parametric Value at Risk.

    Args:
        volatility: Portfolio volatility
        value: Portfolio value
        confidence: Confidence level

    Returns:
        Loss threshold in currency units
    """
    return z_score(confidence) * volatility * value


def parametric_cvar(
    volatility: float,
    value: float,
    confidence: float = 0.95,
) -> float:
    """
    Parametric Conditional VaR (expected shortfall) under normality.

    CVaR is the expected loss given that loss exceeds VaR:
    ``sigma * value * pdf(z) / (1 - confidence)``.
    """
    z = float(scipy_stats.norm.ppf(confidence))
    tail = safe_divide(float(scipy_stats.norm.pdf(z)), 1 - confidence)
    return volatility * value * tail


# =============================================================================
# RISK METRICS ENGINE
# =============================================================================

class RiskMetricsEngine:
    """
    Account-level risk metrics calculator.

    Allocations are percentages; every weighted sum uses allocation / 100.

    Example:
        engine = RiskMetricsEngine()
        metrics = engine.calculate(account)
        print(metrics.overall_risk_score, metrics.portfolio_var)
    """

    def __init__(
        self,
        profiles: RiskProfileProvider | None = None,
        var_confidence: float | None = None,
        market_volatility: float | None = None,
        risk_free_rate: float | None = None,
    ):
        """
        Initialize engine.

        Args:
            profiles: Per-asset risk profile provider (None = static table)
            var_confidence: VaR confidence level
            market_volatility: Reference market volatility for beta
            risk_free_rate: Annual risk-free rate for Sharpe
        """
        cfg = settings.risk
        self.profiles = profiles or StaticRiskProfileProvider()
        self.var_confidence = cfg.var_confidence if var_confidence is None else var_confidence
        self.market_volatility = cfg.market_volatility if market_volatility is None else market_volatility
        self.risk_free_rate = cfg.risk_free_rate if risk_free_rate is None else risk_free_rate

    def _profile(self, asset: AllocatedAsset) -> AssetRiskProfile:
        return self.profiles.profile(asset.symbol)

    # -------------------------------------------------------------------------
    # Scores
    # -------------------------------------------------------------------------

    def asset_risk_score(self, asset: AllocatedAsset) -> float:
        """Blend of volatility, correlation and illiquidity in [0, 1]."""
        p = self._profile(asset)
        score = p.volatility * 0.4 + p.correlation * 0.3 + (1 - p.liquidity) * 0.3
        return clamp(score, 0.0, 1.0)

    def diversification_score(self, assets: Sequence[AllocatedAsset]) -> float:
        """100 minus mean absolute deviation from equal allocation."""
        if not assets:
            return 0.0

        ideal = 100 / len(assets)
        mean_deviation = sum(abs(a.allocation - ideal) for a in assets) / len(assets)
        return clamp(100 - mean_deviation, 0.0, 100.0)

    def volatility_score(self, assets: Sequence[AllocatedAsset]) -> float:
        """Allocation-weighted volatility on a 0-100 scale."""
        if not assets:
            return 0.0
        return clamp(self.portfolio_volatility(assets) * 100, 0.0, 100.0)

    def liquidity_score(self, assets: Sequence[AllocatedAsset]) -> float:
        """Allocation-weighted liquidity on a 0-100 scale; 100 when empty."""
        if not assets:
            return 100.0

        weighted = sum(a.allocation / 100 * self._profile(a).liquidity for a in assets)
        return clamp(weighted * 100, 0.0, 100.0)

    def concentration_risk(self, assets: Sequence[AllocatedAsset]) -> float:
        """Largest single allocation in percent."""
        if not assets:
            return 0.0
        return clamp(max(a.allocation for a in assets), 0.0, 100.0)

    def correlation_risk(self, assets: Sequence[AllocatedAsset]) -> float:
        """Mean pairwise correlation over unique pairs on a 0-100 scale."""
        if len(assets) < 2:
            return 0.0

        matrix = self.pairwise_correlation(assets)
        upper = matrix[np.triu_indices(len(assets), k=1)]
        return clamp(float(np.mean(upper)) * 100, 0.0, 100.0)

    @staticmethod
    def overall_risk_score(
        volatility_score: float,
        concentration_risk: float,
        correlation_risk: float,
        diversification_score: float,
    ) -> float:
        """Weighted blend of the component scores."""
        score = (
            volatility_score * 0.4
            + concentration_risk * 0.3
            + correlation_risk * 0.2
            + (100 - diversification_score) * 0.1
        )
        return clamp(score, 0.0, 100.0)

    # -------------------------------------------------------------------------
    # Portfolio statistics
    # -------------------------------------------------------------------------

    def pairwise_correlation(self, assets: Sequence[AllocatedAsset]) -> NDArray[np.float64]:
        """
        Correlation matrix implied by the profile table.

        A pair's correlation is the mean of the two assets' market
        correlation scores; the diagonal is 1.
        """
        scores = np.array([self._profile(a).correlation for a in assets], dtype=float)
        matrix = (scores[:, None] + scores[None, :]) / 2
        np.fill_diagonal(matrix, 1.0)
        return matrix

    def portfolio_volatility(self, assets: Sequence[AllocatedAsset]) -> float:
        """Allocation-weighted volatility (fraction)."""
        return sum(a.allocation / 100 * self._profile(a).volatility for a in assets)

    def expected_return(self, assets: Sequence[AllocatedAsset]) -> float:
        """Heuristic expected return: allocation-weighted (1 - volatility)."""
        return sum(a.allocation / 100 * (1 - self._profile(a).volatility) for a in assets)

    def beta(self, assets: Sequence[AllocatedAsset]) -> float:
        """Weighted correlation scaled by relative volatility; 1 when empty."""
        if not assets:
            return 1.0

        weighted_corr = sum(a.allocation / 100 * self._profile(a).correlation for a in assets)
        return weighted_corr * safe_divide(self.portfolio_volatility(assets), self.market_volatility)

    def sharpe_ratio(self, assets: Sequence[AllocatedAsset]) -> float:
        """Excess return per unit of volatility; 0 when volatility is 0."""
        return safe_divide(
            self.expected_return(assets) - self.risk_free_rate,
            self.portfolio_volatility(assets),
        )

    def diversification_ratio(self, assets: Sequence[AllocatedAsset]) -> float:
        """
        Weighted average volatility over correlated portfolio volatility.

        Returns 0 for an empty account or a zero-volatility book.
        """
        if not assets:
            return 0.0

        weights = np.array([a.allocation / 100 for a in assets], dtype=float)
        vols = np.array([self._profile(a).volatility for a in assets], dtype=float)
        cov = np.outer(vols, vols) * self.pairwise_correlation(assets)
        port_vol = float(np.sqrt(max(float(weights @ cov @ weights), 0.0)))
        return safe_divide(float(weights @ vols), port_vol)

    @staticmethod
    def current_drawdown(account: AccountSnapshot) -> float:
        """Drawdown of total value from the initial balance, floored at 0."""
        initial = account.initial_balance if account.initial_balance else account.balance
        if initial <= 0:
            return 0.0
        return max(0.0, safe_divide(initial - account.total_value, initial))

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def calculate(self, account: AccountSnapshot) -> RiskMetrics:
        """
        Calculate all risk metrics for an account snapshot.

        Args:
            account: Balance plus allocated assets

        Returns:
            RiskMetrics record
        """
        assets = account.assets

        diversification = self.diversification_score(assets)
        volatility = self.volatility_score(assets)
        concentration = self.concentration_risk(assets)
        correlation = self.correlation_risk(assets)

        value = account.total_value
        port_vol = self.portfolio_volatility(assets)

        metrics = RiskMetrics(
            overall_risk_score=self.overall_risk_score(
                volatility, concentration, correlation, diversification
            ),
            diversification_score=diversification,
            volatility_score=volatility,
            liquidity_score=self.liquidity_score(assets),
            concentration_risk=concentration,
            correlation_risk=correlation,
            portfolio_value=value,
            portfolio_volatility=port_vol,
            expected_return=self.expected_return(assets),
            current_drawdown=self.current_drawdown(account),
            portfolio_var=parametric_var(port_vol, value, self.var_confidence),
            portfolio_cvar=parametric_cvar(port_vol, value, self.var_confidence),
            beta=self.beta(assets),
            sharpe_ratio=self.sharpe_ratio(assets),
            diversification_ratio=self.diversification_ratio(assets),
        )

        logger.debug(
            f"Risk metrics: score={metrics.overall_risk_score:.1f}, "
            f"VaR={metrics.portfolio_var:,.2f}, drawdown={metrics.current_drawdown:.2%}"
        )

        return metrics
