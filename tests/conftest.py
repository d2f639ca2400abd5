"""
Pytest Configuration and Fixtures
==================================

Shared fixtures for all tests of the Cryptofolio risk engine.

Author: Cryptofolio
License: MIT
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.types import AccountSnapshot, AllocatedAsset, Asset


# =============================================================================
# HELPERS
# =============================================================================

class FixedCorrelationModel:
    """Correlation model with a constant off-diagonal value."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.calls = 0

    def estimate(self, assets: Sequence[Asset]) -> np.ndarray:
        self.calls += 1
        n = len(assets)
        matrix = np.full((n, n), self.value)
        np.fill_diagonal(matrix, 1.0)
        return matrix


# =============================================================================
# CONFIGURATION
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root path."""
    return PROJECT_ROOT


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def fixed_correlation() -> FixedCorrelationModel:
    """Deterministic correlation model (0.5 off-diagonal)."""
    return FixedCorrelationModel(0.5)


# =============================================================================
# PORTFOLIO FIXTURES
# =============================================================================

@pytest.fixture
def sample_assets() -> list[Asset]:
    """Three crypto assets with volatilities 0.7 / 0.8 / 1.0."""
    return [
        Asset("BTC", "Bitcoin", 0.5, 0.30, 0.7, 60000.0),
        Asset("ETH", "Ethereum", 0.3, 0.30, 0.8, 3000.0),
        Asset("SOL", "Solana", 0.2, 0.30, 1.0, 150.0),
    ]


@pytest.fixture
def mixed_assets() -> list[Asset]:
    """Crypto and non-crypto assets."""
    return [
        Asset("BTC", "Bitcoin", 0.25, 0.40, 0.70, 60000.0),
        Asset("ETH", "Ethereum", 0.25, 0.50, 0.80, 3000.0),
        Asset("GLD", "Gold ETF", 0.25, 0.05, 0.15, 180.0),
        Asset("SPY", "S&P 500 ETF", 0.25, 0.08, 0.18, 450.0),
    ]


@pytest.fixture
def sample_returns_df() -> pd.DataFrame:
    """Correlated daily returns for BTC/ETH and an independent SPY."""
    np.random.seed(42)
    n = 500
    dates = pd.date_range(start="2023-01-01", periods=n, freq="D")

    market = np.random.normal(0.001, 0.03, n)
    return pd.DataFrame({
        "BTC": market + np.random.normal(0, 0.01, n),
        "ETH": market + np.random.normal(0, 0.015, n),
        "SPY": np.random.normal(0.0004, 0.01, n),
    }, index=dates)


# =============================================================================
# ACCOUNT FIXTURES
# =============================================================================

@pytest.fixture
def sample_account() -> AccountSnapshot:
    """Diversified account across three profiled assets."""
    return AccountSnapshot(
        balance=1000.0,
        assets=(
            AllocatedAsset("bitcoin", 40.0, 4000.0),
            AllocatedAsset("ethereum", 30.0, 3000.0),
            AllocatedAsset("solana", 30.0, 3000.0),
        ),
        initial_balance=11000.0,
    )


@pytest.fixture
def single_asset_account() -> AccountSnapshot:
    """Everything in bitcoin, no drawdown."""
    return AccountSnapshot(
        balance=0.0,
        assets=(AllocatedAsset("bitcoin", 100.0, 10000.0),),
        initial_balance=10000.0,
    )


@pytest.fixture
def empty_account() -> AccountSnapshot:
    """Cash only."""
    return AccountSnapshot(balance=1000.0)
