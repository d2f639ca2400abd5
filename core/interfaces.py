"""
Interfaces Module
=================

Protocols defining the pluggable estimation seams of the risk engine.

These interfaces enable:
- Swapping the heuristic correlation model for a historical estimator
- Swapping the static risk-profile table for a live provider
- Easy testing with fixed-value implementations

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from core.types import Asset, AssetRiskProfile


@runtime_checkable
class CorrelationModel(Protocol):
    """
    Protocol for correlation estimators.

    Implementations must return an N x N matrix (N = len(assets)) with a
    unit diagonal, symmetric entries and off-diagonal values in [-1, 1],
    ordered like ``assets``.
    """

    def estimate(self, assets: Sequence[Asset]) -> NDArray[np.float64]:
        """
        Estimate the correlation matrix for a list of assets.

        Args:
            assets: Assets in portfolio order

        Returns:
            Correlation matrix
        """
        ...


@runtime_checkable
class RiskProfileProvider(Protocol):
    """
    Protocol for per-asset risk profile lookups.

    Providers must never fail for an unknown symbol; they return a
    neutral default profile instead.
    """

    def profile(self, symbol: str) -> AssetRiskProfile:
        """
        Get the risk profile for a symbol.

        Args:
            symbol: Asset symbol or profile key

        Returns:
            Risk profile for the symbol
        """
        ...
