"""
Portfolio Construction Module
=============================

Aggregates a weighted asset list into a Portfolio: total value, expected
return, correlation-aware volatility, Sharpe ratio and a drawdown estimate.

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from config import settings
from core.interfaces import CorrelationModel
from core.types import Asset, Portfolio
from core.validation import validate_assets, validate_correlation_matrix
from utils.helpers import safe_divide
from utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def covariance_matrix(
    volatilities: NDArray[np.float64],
    correlation_matrix: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Build a covariance matrix from volatilities and correlations."""
    return np.outer(volatilities, volatilities) * correlation_matrix


def portfolio_return(
    weights: NDArray[np.float64],
    expected_returns: NDArray[np.float64],
) -> float:
    """Calculate portfolio expected return."""
    return float(np.dot(weights, expected_returns))


def portfolio_volatility(
    weights: NDArray[np.float64],
    volatilities: NDArray[np.float64],
    correlation_matrix: NDArray[np.float64],
) -> float:
    """Calculate portfolio volatility."""
    if len(weights) == 0:
        return 0.0
    cov = covariance_matrix(volatilities, correlation_matrix)
    variance = float(np.dot(weights.T, np.dot(cov, weights)))
    # Clip tiny negative round-off before the square root
    return float(np.sqrt(max(variance, 0.0)))


def sharpe_ratio(
    expected_return: float,
    volatility: float,
    risk_free_rate: float | None = None,
) -> float:
    """
    Calculate Sharpe ratio.

    Returns 0 when volatility is zero.
    """
    rf = settings.optimizer.risk_free_rate if risk_free_rate is None else risk_free_rate
    return safe_divide(expected_return - rf, volatility)


def asset_arrays(
    assets: Sequence[Asset],
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Split assets into (weights, expected_returns, volatilities) arrays."""
    weights = np.array([a.weight for a in assets], dtype=float)
    expected_returns = np.array([a.expected_return for a in assets], dtype=float)
    volatilities = np.array([a.volatility for a in assets], dtype=float)
    return weights, expected_returns, volatilities


# =============================================================================
# CONSTRUCTION
# =============================================================================

def construct_portfolio(
    assets: Sequence[Asset],
    correlation_matrix: NDArray[np.float64],
    risk_free_rate: float | None = None,
    unit_scale: float | None = None,
    drawdown_multiplier: float | None = None,
) -> Portfolio:
    """
    Aggregate weighted assets into a Portfolio.

    Args:
        assets: Weighted assets
        correlation_matrix: Correlation matrix ordered like ``assets``
        risk_free_rate: Annual risk-free rate (None = from settings)
        unit_scale: Currency units per unit of weight*price (None = from settings)
        drawdown_multiplier: Volatility multiple used as drawdown proxy

    Returns:
        Portfolio aggregate

    Raises:
        AssetValidationError: If an asset has negative volatility
        CorrelationMatrixError: If the matrix is malformed
    """
    validate_assets(assets)
    validate_correlation_matrix(correlation_matrix, size=len(assets))

    cfg = settings.optimizer
    scale = cfg.unit_scale if unit_scale is None else unit_scale
    dd_mult = cfg.drawdown_multiplier if drawdown_multiplier is None else drawdown_multiplier

    weights, expected_returns, volatilities = asset_arrays(assets)
    prices = np.array([a.price for a in assets], dtype=float)

    total_value = float(np.sum(weights * prices * scale))
    exp_return = portfolio_return(weights, expected_returns)
    volatility = portfolio_volatility(weights, volatilities, correlation_matrix)
    sharpe = sharpe_ratio(exp_return, volatility, risk_free_rate)

    portfolio = Portfolio(
        assets=list(assets),
        total_value=total_value,
        expected_return=exp_return,
        volatility=volatility,
        sharpe_ratio=sharpe,
        max_drawdown=volatility * dd_mult,
    )

    logger.debug(
        f"Constructed portfolio: n={len(assets)}, "
        f"Return={exp_return:.2%}, Vol={volatility:.2%}, Sharpe={sharpe:.2f}"
    )

    return portfolio


def construct_from_model(
    assets: Sequence[Asset],
    model: CorrelationModel,
    **kwargs,
) -> Portfolio:
    """Construct a portfolio using a freshly estimated correlation matrix."""
    return construct_portfolio(assets, model.estimate(assets), **kwargs)
