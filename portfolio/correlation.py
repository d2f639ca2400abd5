"""
Correlation and volatility estimation for the risk engine.

This module provides:
- HeuristicCorrelationModel: correlation bands from asset class membership
- HistoricalCorrelationModel: correlation from a returns history
- Annualized volatility from a price series

Both models satisfy ``core.interfaces.CorrelationModel`` so callers can
swap one for the other without touching the optimizer.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from config import load_risk_profiles, settings
from core.types import Asset
from utils.logger import get_logger

logger = get_logger(__name__)


def default_crypto_symbols() -> frozenset[str]:
    """Crypto allow-list from configuration."""
    return frozenset(s.upper() for s in load_risk_profiles()["crypto_symbols"])


def is_crypto(symbol: str, crypto_symbols: Iterable[str] | None = None) -> bool:
    """Check whether a symbol belongs to the crypto allow-list."""
    allow_list = default_crypto_symbols() if crypto_symbols is None else crypto_symbols
    return symbol.upper() in allow_list


class HeuristicCorrelationModel:
    """
    Correlation model driven by asset class membership.

    Pairs of crypto assets draw a correlation from the high band, every
    other pair from the low band. This is a modeling simplification, not a
    statistical estimate.

    Example:
        model = HeuristicCorrelationModel(rng=np.random.default_rng(42))
        matrix = model.estimate(assets)
    """

    def __init__(
        self,
        rng: np.random.Generator | int | None = None,
        crypto_symbols: Iterable[str] | None = None,
        crypto_band: tuple[float, float] = (0.6, 0.9),
        mixed_band: tuple[float, float] = (0.0, 0.4),
    ):
        """
        Initialize model.

        Args:
            rng: Random generator or seed (None = seed from settings)
            crypto_symbols: Crypto allow-list (None = from configuration)
            crypto_band: Correlation range for crypto/crypto pairs
            mixed_band: Correlation range for all other pairs
        """
        if rng is None:
            rng = settings.simulation.random_seed
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

        symbols = default_crypto_symbols() if crypto_symbols is None else crypto_symbols
        self.crypto_symbols = frozenset(s.upper() for s in symbols)
        self.crypto_band = crypto_band
        self.mixed_band = mixed_band

    def estimate(self, assets: Sequence[Asset]) -> NDArray[np.float64]:
        """
        Estimate the correlation matrix.

        Args:
            assets: Assets in portfolio order

        Returns:
            Symmetric matrix with unit diagonal
        """
        n = len(assets)
        matrix = np.eye(n)

        flags = [is_crypto(asset.symbol, self.crypto_symbols) for asset in assets]

        # Draw the upper triangle only and mirror it
        for i in range(n):
            for j in range(i + 1, n):
                low, high = self.crypto_band if flags[i] and flags[j] else self.mixed_band
                value = low + self.rng.random() * (high - low)
                matrix[i, j] = value
                matrix[j, i] = value

        return matrix


class HistoricalCorrelationModel:
    """
    Correlation model estimated from historical returns.

    Symbols missing from the returns history are treated as uncorrelated
    with everything else.
    """

    def __init__(
        self,
        returns: pd.DataFrame,
        lookback: int | None = None,
        min_periods: int = 2,
    ) -> None:
        """
        Initialize the model.

        Args:
            returns: Asset returns DataFrame (one column per symbol)
            lookback: Number of most recent rows to use (None = all)
            min_periods: Minimum overlapping observations per pair
        """
        self.returns = returns
        self.lookback = lookback
        self.min_periods = min_periods

    def estimate(self, assets: Sequence[Asset]) -> NDArray[np.float64]:
        """Estimate the correlation matrix for ``assets``."""
        symbols = [asset.symbol for asset in assets]
        window = self.returns if self.lookback is None else self.returns.tail(self.lookback)

        missing = [s for s in symbols if s not in window.columns]
        if missing:
            logger.warning(f"No return history for {missing}, assuming zero correlation")

        corr = (
            window.corr(min_periods=self.min_periods)
            .reindex(index=symbols, columns=symbols)
            .fillna(0.0)
        )

        matrix = corr.to_numpy(dtype=float)
        matrix = np.clip((matrix + matrix.T) / 2, -1.0, 1.0)
        np.fill_diagonal(matrix, 1.0)
        return matrix


def annualized_volatility(
    prices: Sequence[float] | pd.Series,
    periods_per_year: int | None = None,
) -> float:
    """
    Annualized volatility of simple returns.

    Args:
        prices: Price series, oldest first
        periods_per_year: Annualization factor (None = trading days from settings)

    Returns:
        Population standard deviation of returns scaled to a year;
        0 for fewer than two prices
    """
    series = pd.Series(prices, dtype=float)
    if len(series) < 2:
        return 0.0

    periods = periods_per_year or settings.simulation.trading_days_per_year
    returns = series.pct_change().dropna()
    return float(returns.std(ddof=0) * np.sqrt(periods))
