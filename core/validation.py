"""
Boundary validation for engine inputs.

Contract violations are rejected here, before any calculation consumes
them. Numerical degeneracy (empty lists, single assets, zero volatility
in ratios) is not a violation and is handled by the calculators.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from core.types import (
    Asset,
    AssetValidationError,
    CorrelationMatrixError,
    WeightNormalizationError,
)


def validate_assets(
    assets: Sequence[Asset],
    require_positive_volatility: bool = False,
) -> None:
    """
    Validate asset volatilities and weights.

    Args:
        assets: Assets to check
        require_positive_volatility: Reject zero volatility as well
            (inverse-volatility weighting divides by it)

    Raises:
        AssetValidationError: On the first offending asset
    """
    seen: set[str] = set()
    for asset in assets:
        if asset.symbol in seen:
            raise AssetValidationError(f"Duplicate asset symbol: {asset.symbol}")
        seen.add(asset.symbol)

        if not np.isfinite(asset.volatility) or asset.volatility < 0:
            raise AssetValidationError(
                f"{asset.symbol}: volatility must be >= 0, got {asset.volatility}"
            )
        if require_positive_volatility and asset.volatility == 0:
            raise AssetValidationError(
                f"{asset.symbol}: volatility must be > 0 for inverse-volatility weighting"
            )
        if not 0.0 <= asset.weight <= 1.0:
            raise AssetValidationError(
                f"{asset.symbol}: weight must be in [0, 1], got {asset.weight}"
            )


def validate_correlation_matrix(
    matrix: NDArray[np.float64],
    size: int | None = None,
    atol: float = 1e-9,
) -> None:
    """
    Validate a correlation matrix.

    Args:
        matrix: Matrix to check
        size: Expected dimension (None = any)
        atol: Absolute tolerance for symmetry and the unit diagonal

    Raises:
        CorrelationMatrixError: If the matrix is malformed
    """
    matrix = np.asarray(matrix, dtype=float)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise CorrelationMatrixError(f"Correlation matrix must be square, got shape {matrix.shape}")
    if size is not None and matrix.shape[0] != size:
        raise CorrelationMatrixError(
            f"Correlation matrix is {matrix.shape[0]}x{matrix.shape[0]}, expected {size}x{size}"
        )
    if not np.all(np.isfinite(matrix)):
        raise CorrelationMatrixError("Correlation matrix contains non-finite values")
    if not np.allclose(np.diag(matrix), 1.0, atol=atol):
        raise CorrelationMatrixError("Correlation matrix diagonal must be 1")
    if not np.allclose(matrix, matrix.T, atol=atol):
        raise CorrelationMatrixError("Correlation matrix must be symmetric")
    if np.any(np.abs(matrix) > 1.0 + atol):
        raise CorrelationMatrixError("Correlation entries must lie in [-1, 1]")


def validate_weights_sum(
    weights: Sequence[float],
    tolerance: float = 1e-6,
) -> None:
    """
    Validate that weights sum to one.

    Args:
        weights: Portfolio weights
        tolerance: Allowed absolute deviation from 1

    Raises:
        WeightNormalizationError: If the sum is off by more than tolerance
    """
    if len(weights) == 0:
        return

    total = float(np.sum(weights))
    if abs(total - 1.0) > tolerance:
        raise WeightNormalizationError(f"Weights sum to {total:.6f}, expected 1.0")
