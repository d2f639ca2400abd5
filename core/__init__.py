"""
CORE MODULE
Data model, enums, interfaces and validation for the risk engine.

- enums.py: risk tolerance, rebalance and alert enums
- types.py: value types and the exception hierarchy
- interfaces.py: pluggable estimator protocols
- validation.py: boundary checks
"""

from core.enums import (
    RiskTolerance,
    RebalanceAction,
    RebalancePriority,
    AlertType,
)

from core.types import (
    # Exceptions
    RiskEngineError,
    ValidationError,
    AssetValidationError,
    CorrelationMatrixError,
    WeightNormalizationError,
    SimulationConfigError,
    ConfigurationError,

    # Inputs
    Asset,
    AnalystView,
    AssetRiskProfile,
    AllocatedAsset,
    AccountSnapshot,

    # Outputs
    Portfolio,
    RebalanceRecommendation,
    PortfolioRiskSummary,
    OptimizationResult,
    RiskMetrics,
    RiskAlert,
)

from core.interfaces import CorrelationModel, RiskProfileProvider


__all__ = [
    # Enums
    'RiskTolerance',
    'RebalanceAction',
    'RebalancePriority',
    'AlertType',

    # Exceptions
    'RiskEngineError',
    'ValidationError',
    'AssetValidationError',
    'CorrelationMatrixError',
    'WeightNormalizationError',
    'SimulationConfigError',
    'ConfigurationError',

    # Types
    'Asset',
    'AnalystView',
    'AssetRiskProfile',
    'AllocatedAsset',
    'AccountSnapshot',
    'Portfolio',
    'RebalanceRecommendation',
    'PortfolioRiskSummary',
    'OptimizationResult',
    'RiskMetrics',
    'RiskAlert',

    # Interfaces
    'CorrelationModel',
    'RiskProfileProvider',
]
