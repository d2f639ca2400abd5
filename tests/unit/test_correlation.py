"""
Unit tests for correlation models and volatility estimation.
"""

import numpy as np
import pandas as pd
import pytest

from core.interfaces import CorrelationModel
from core.types import Asset
from core.validation import validate_correlation_matrix
from portfolio.correlation import (
    HeuristicCorrelationModel,
    HistoricalCorrelationModel,
    annualized_volatility,
    is_crypto,
)


class TestHeuristicCorrelationModel:
    """Tests for the asset-class correlation model."""

    def test_matrix_is_valid(self, mixed_assets):
        """Test symmetry, unit diagonal and bounds."""
        matrix = HeuristicCorrelationModel(rng=7).estimate(mixed_assets)

        assert matrix.shape == (4, 4)
        assert np.allclose(matrix, matrix.T)
        assert np.allclose(np.diag(matrix), 1.0)
        validate_correlation_matrix(matrix, size=4)

    def test_bands_by_asset_class(self, mixed_assets):
        """Test crypto pairs draw from the high band, other pairs from the low band."""
        matrix = HeuristicCorrelationModel(rng=3).estimate(mixed_assets)

        # BTC/ETH are crypto; GLD/SPY are not
        assert 0.6 <= matrix[0, 1] <= 0.9
        for i, j in [(0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]:
            assert 0.0 <= matrix[i, j] <= 0.4

    def test_reproducible_for_seed(self, sample_assets):
        """Test the same seed gives the same matrix."""
        a = HeuristicCorrelationModel(rng=11).estimate(sample_assets)
        b = HeuristicCorrelationModel(rng=11).estimate(sample_assets)

        np.testing.assert_array_equal(a, b)

    def test_custom_crypto_list(self, sample_assets):
        """Test an empty allow-list puts every pair in the low band."""
        model = HeuristicCorrelationModel(rng=1, crypto_symbols=[])
        matrix = model.estimate(sample_assets)

        upper = matrix[np.triu_indices(3, k=1)]
        assert np.all(upper <= 0.4)

    def test_single_and_empty(self):
        """Test degenerate sizes."""
        model = HeuristicCorrelationModel(rng=1)
        single = [Asset("BTC", "Bitcoin", 1.0, 0.3, 0.7, 1.0)]

        np.testing.assert_array_equal(model.estimate(single), np.eye(1))
        assert model.estimate([]).shape == (0, 0)

    def test_satisfies_protocol(self):
        """Test the model is a CorrelationModel."""
        assert isinstance(HeuristicCorrelationModel(rng=1), CorrelationModel)


class TestIsCrypto:
    """Tests for the crypto allow-list."""

    def test_default_list(self):
        assert is_crypto("BTC")
        assert is_crypto("matic")
        assert not is_crypto("SPY")

    def test_explicit_list(self):
        assert is_crypto("DOGE", ["DOGE"])
        assert not is_crypto("BTC", ["DOGE"])


class TestHistoricalCorrelationModel:
    """Tests for the returns-based correlation model."""

    def test_matrix_is_valid(self, sample_returns_df):
        """Test the estimate is a valid correlation matrix."""
        assets = [
            Asset(symbol, symbol, 0.0, 0.1, 0.5, 1.0)
            for symbol in ["BTC", "ETH", "SPY"]
        ]
        matrix = HistoricalCorrelationModel(sample_returns_df).estimate(assets)

        validate_correlation_matrix(matrix, size=3)
        assert matrix[0, 1] > 0.5
        assert abs(matrix[0, 2]) < 0.3

    def test_asset_order_respected(self, sample_returns_df):
        """Test the matrix follows asset order, not column order."""
        model = HistoricalCorrelationModel(sample_returns_df)
        forward = model.estimate([Asset(s, s, 0.0, 0.1, 0.5, 1.0) for s in ["BTC", "SPY"]])
        reverse = model.estimate([Asset(s, s, 0.0, 0.1, 0.5, 1.0) for s in ["SPY", "BTC"]])

        assert forward[0, 1] == pytest.approx(reverse[0, 1])

    def test_missing_symbol_uncorrelated(self, sample_returns_df):
        """Test symbols without history get zero correlation."""
        assets = [Asset(s, s, 0.0, 0.1, 0.5, 1.0) for s in ["BTC", "XYZ"]]
        matrix = HistoricalCorrelationModel(sample_returns_df).estimate(assets)

        assert matrix[0, 1] == 0.0
        assert matrix[1, 1] == 1.0

    def test_lookback(self, sample_returns_df):
        """Test only the trailing window is used."""
        assets = [Asset(s, s, 0.0, 0.1, 0.5, 1.0) for s in ["BTC", "ETH"]]
        model = HistoricalCorrelationModel(sample_returns_df, lookback=50)

        expected = sample_returns_df.tail(50)[["BTC", "ETH"]].corr().iloc[0, 1]
        assert model.estimate(assets)[0, 1] == pytest.approx(expected)


class TestAnnualizedVolatility:
    """Tests for volatility from prices."""

    def test_known_value(self):
        """Test returns of +10% and -10% give 10% daily volatility."""
        vol = annualized_volatility([100.0, 110.0, 99.0], periods_per_year=252)

        assert vol == pytest.approx(0.1 * np.sqrt(252))

    def test_constant_prices(self):
        assert annualized_volatility([50.0] * 10) == 0.0

    def test_too_few_prices(self):
        assert annualized_volatility([]) == 0.0
        assert annualized_volatility([100.0]) == 0.0

    def test_accepts_series(self):
        prices = pd.Series([100.0, 110.0, 99.0])
        assert annualized_volatility(prices, periods_per_year=1) == pytest.approx(0.1)
