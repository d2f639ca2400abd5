"""
Portfolio Module
================

Portfolio optimization for the Cryptofolio engine.
Provides correlation estimation, weight optimization, portfolio
statistics and rebalancing recommendations.

Components:
- correlation: heuristic and historical correlation models
- construction: portfolio statistics from weights
- optimizer: inverse-volatility optimizer with Black-Litterman views
- rebalancer: drift-based rebalance recommendations

Author: Cryptofolio
License: MIT
"""

from portfolio.correlation import (
    HeuristicCorrelationModel,
    HistoricalCorrelationModel,
    annualized_volatility,
    is_crypto,
)
from portfolio.construction import (
    covariance_matrix,
    portfolio_return,
    portfolio_volatility,
    sharpe_ratio,
    construct_portfolio,
    construct_from_model,
)
from portfolio.optimizer import (
    # Classes
    OptimizationConfig,
    PortfolioOptimizer,
    # Functions
    apply_views,
    calculate_optimal_weights,
    risk_summary,
)
from portfolio.rebalancer import (
    Rebalancer,
    generate_rebalance_recommendations,
)

__all__ = [
    # Correlation
    "HeuristicCorrelationModel",
    "HistoricalCorrelationModel",
    "annualized_volatility",
    "is_crypto",
    # Construction
    "covariance_matrix",
    "portfolio_return",
    "portfolio_volatility",
    "sharpe_ratio",
    "construct_portfolio",
    "construct_from_model",
    # Optimizer
    "OptimizationConfig",
    "PortfolioOptimizer",
    "apply_views",
    "calculate_optimal_weights",
    "risk_summary",
    # Rebalancer
    "Rebalancer",
    "generate_rebalance_recommendations",
]
