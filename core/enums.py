"""
Engine Enums
============

Enumerations shared by the optimizer, the rebalance recommender and the
risk engine.

Usage:
    from core.enums import RiskTolerance

    RiskTolerance("moderate") is RiskTolerance("medium")  # True

Author: Cryptofolio
License: MIT
"""

from enum import Enum


class RiskTolerance(str, Enum):
    """
    Investor risk tolerance.

    The optimizer speaks conservative/moderate/aggressive while the
    account-level risk API speaks low/medium/high; both spellings resolve
    to the same member.
    """

    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"

    @classmethod
    def _missing_(cls, value: object) -> "RiskTolerance | None":
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value == lowered or member.level == lowered:
                    return member
        return None

    @property
    def level(self) -> str:
        """Account-level name (low/medium/high)."""
        return {
            "conservative": "low",
            "moderate": "medium",
            "aggressive": "high",
        }[self.value]


class RebalanceAction(str, Enum):
    """Rebalance trade direction."""
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class RebalancePriority(str, Enum):
    """Rebalance urgency, ordered by rank."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class AlertType(str, Enum):
    """Risk alert levels."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
