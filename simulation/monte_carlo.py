"""
Monte Carlo simulation of forward portfolio returns.

Each path accumulates daily log-returns drawn from a normal distribution
(Box-Muller transform over a seeded uniform source) and converts the sum
into a simple return. Paths are independent, so they can be split across
worker threads, each with its own child random stream.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from config import settings
from core.interfaces import CorrelationModel
from core.types import Asset, Portfolio, SimulationConfigError
from portfolio.construction import asset_arrays, portfolio_return, portfolio_volatility
from portfolio.correlation import HeuristicCorrelationModel
from utils.logger import get_logger, perf_logger

logger = get_logger(__name__)

# Paths simulated per vectorized batch
_BATCH_SIZE = 10_000


@dataclass
class MonteCarloStatistics:
    """Summary statistics of simulated outcomes."""
    mean: float
    median: float
    standard_deviation: float
    percentile_5: float
    percentile_95: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "mean": self.mean,
            "median": self.median,
            "standard_deviation": self.standard_deviation,
            "percentile_5": self.percentile_5,
            "percentile_95": self.percentile_95,
        }


@dataclass
class MonteCarloResult:
    """Result of Monte Carlo simulation."""
    outcomes: NDArray[np.float64]  # sorted ascending
    statistics: MonteCarloStatistics
    n_simulations: int
    time_horizon: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "outcomes": self.outcomes.tolist(),
            "statistics": self.statistics.to_dict(),
            "n_simulations": self.n_simulations,
            "time_horizon": self.time_horizon,
        }


def box_muller(rng: np.random.Generator, size: int | tuple[int, ...]) -> NDArray[np.float64]:
    """
    Standard normal variates via the Box-Muller transform.

    Args:
        rng: Uniform random source
        size: Output shape

    Returns:
        Array of N(0, 1) draws
    """
    # 1 - U keeps u1 in (0, 1] so the log is finite
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def summarize_outcomes(outcomes: NDArray[np.float64]) -> MonteCarloStatistics:
    """
    Summary statistics of sorted outcomes.

    Median and percentiles are read from the sorted array at
    ``n // 2``, ``floor(0.05 n)`` and ``floor(0.95 n)``; the standard
    deviation is the population one.
    """
    n = len(outcomes)
    return MonteCarloStatistics(
        mean=float(np.mean(outcomes)),
        median=float(outcomes[n // 2]),
        standard_deviation=float(np.std(outcomes)),
        percentile_5=float(outcomes[int(np.floor(n * 0.05))]),
        percentile_95=float(outcomes[int(np.floor(n * 0.95))]),
    )


class MonteCarloSimulator:
    """
    Forward return simulator.

    Reproducible for a fixed seed and worker count.

    Example:
        simulator = MonteCarloSimulator(random_state=7)
        result = simulator.run(expected_return=0.12, volatility=0.6)
        print(result.statistics.percentile_5)
    """

    def __init__(
        self,
        simulations: int | None = None,
        time_horizon: int | None = None,
        random_state: np.random.Generator | int | None = None,
        workers: int = 1,
        trading_days: int | None = None,
    ):
        """
        Initialize simulator.

        Args:
            simulations: Default number of paths
            time_horizon: Default steps (trading days) per path
            random_state: Random generator or seed (None = seed from settings)
            workers: Worker threads used to generate paths
            trading_days: Steps per year used to scale drift and volatility
        """
        cfg = settings.simulation
        self.simulations = cfg.simulations if simulations is None else simulations
        self.time_horizon = cfg.time_horizon if time_horizon is None else time_horizon
        self.trading_days = trading_days or cfg.trading_days_per_year
        self.workers = workers

        if random_state is None:
            random_state = cfg.random_seed
        self.rng = (
            random_state
            if isinstance(random_state, np.random.Generator)
            else np.random.default_rng(random_state)
        )

        if self.workers < 1:
            raise SimulationConfigError(f"workers must be >= 1, got {workers}")

    def _simulate_paths(
        self,
        rng: np.random.Generator,
        n_paths: int,
        time_horizon: int,
        daily_drift: float,
        daily_vol: float,
    ) -> NDArray[np.float64]:
        """Final simple returns of ``n_paths`` independent paths."""
        finals = np.empty(n_paths)
        for start in range(0, n_paths, _BATCH_SIZE):
            stop = min(start + _BATCH_SIZE, n_paths)
            shocks = box_muller(rng, (stop - start, time_horizon))
            cumulative = np.sum(shocks * daily_vol + daily_drift, axis=1)
            finals[start:stop] = np.exp(cumulative) - 1
        return finals

    def run(
        self,
        expected_return: float,
        volatility: float,
        simulations: int | None = None,
        time_horizon: int | None = None,
    ) -> MonteCarloResult:
        """
        Simulate forward returns.

        Args:
            expected_return: Annual portfolio expected return
            volatility: Annual portfolio volatility
            simulations: Number of paths (None = default)
            time_horizon: Steps per path (None = default)

        Returns:
            MonteCarloResult with sorted outcomes and statistics

        Raises:
            SimulationConfigError: If the parameters are out of range
        """
        simulations = self.simulations if simulations is None else simulations
        time_horizon = self.time_horizon if time_horizon is None else time_horizon

        if simulations < 1:
            raise SimulationConfigError(f"simulations must be >= 1, got {simulations}")
        if time_horizon < 0:
            raise SimulationConfigError(f"time_horizon must be >= 0, got {time_horizon}")
        if volatility < 0:
            raise SimulationConfigError(f"volatility must be >= 0, got {volatility}")

        daily_drift = expected_return / self.trading_days
        daily_vol = volatility / np.sqrt(self.trading_days)

        with perf_logger.timed("monte_carlo", simulations=simulations, time_horizon=time_horizon):
            if self.workers == 1:
                outcomes = self._simulate_paths(self.rng, simulations, time_horizon, daily_drift, daily_vol)
            else:
                chunks = np.array_split(np.arange(simulations), self.workers)
                child_rngs = self.rng.spawn(len(chunks))
                with ThreadPoolExecutor(max_workers=self.workers) as executor:
                    futures = [
                        executor.submit(
                            self._simulate_paths, child, len(chunk), time_horizon, daily_drift, daily_vol
                        )
                        for child, chunk in zip(child_rngs, chunks)
                    ]
                    outcomes = np.concatenate([f.result() for f in futures])

            outcomes.sort()
            statistics = summarize_outcomes(outcomes)

        logger.debug(
            f"Monte Carlo: n={simulations}, horizon={time_horizon}, "
            f"mean={statistics.mean:.2%}, p5={statistics.percentile_5:.2%}, "
            f"p95={statistics.percentile_95:.2%}"
        )

        return MonteCarloResult(
            outcomes=outcomes,
            statistics=statistics,
            n_simulations=simulations,
            time_horizon=time_horizon,
        )

    def run_for_portfolio(
        self,
        portfolio: Portfolio,
        simulations: int | None = None,
        time_horizon: int | None = None,
    ) -> MonteCarloResult:
        """Simulate from a constructed portfolio's return and volatility."""
        return self.run(portfolio.expected_return, portfolio.volatility, simulations, time_horizon)

    def run_for_assets(
        self,
        assets: Sequence[Asset],
        correlation_model: CorrelationModel | None = None,
        simulations: int | None = None,
        time_horizon: int | None = None,
    ) -> MonteCarloResult:
        """
        Simulate from weighted assets.

        Args:
            assets: Weighted assets
            correlation_model: Correlation estimator (None = heuristic model
                sharing this simulator's random stream)
            simulations: Number of paths
            time_horizon: Steps per path

        Returns:
            MonteCarloResult
        """
        model = correlation_model or HeuristicCorrelationModel(rng=self.rng)
        weights, expected_returns, volatilities = asset_arrays(assets)
        matrix = model.estimate(assets)

        return self.run(
            portfolio_return(weights, expected_returns),
            portfolio_volatility(weights, volatilities, matrix),
            simulations,
            time_horizon,
        )
