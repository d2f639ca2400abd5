"""
Simulation Module
=================

Monte Carlo projection of portfolio returns and recurring runs.

Author: Cryptofolio
License: MIT
"""

from simulation.monte_carlo import (
    MonteCarloResult,
    MonteCarloSimulator,
    MonteCarloStatistics,
    box_muller,
    summarize_outcomes,
)
from simulation.scheduler import (
    SimulationHandle,
    start_recurring,
)

__all__ = [
    "MonteCarloResult",
    "MonteCarloSimulator",
    "MonteCarloStatistics",
    "box_muller",
    "summarize_outcomes",
    "SimulationHandle",
    "start_recurring",
]
