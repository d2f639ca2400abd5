"""
Risk profile tables.

Provides:
- StaticRiskProfileProvider: per-asset volatility/correlation/liquidity
  lookups backed by ``config/risk_profiles.yaml``
- ToleranceLimits: fixed limits per risk tolerance level
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from config import load_risk_profiles, settings
from core.enums import RiskTolerance
from core.types import AssetRiskProfile, ConfigurationError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ToleranceLimits:
    """
    Fixed limits attached to a risk tolerance level.

    Attributes:
        max_single_asset_allocation: Largest allowed weight of one asset
        max_volatile_asset_allocation: Largest allowed weight in volatile assets
        max_drawdown: Drawdown the investor accepts
        sharpe_ratio_threshold: Minimum acceptable Sharpe ratio
        risk_multiplier: Scalar applied by the weight optimizer
        stop_multiplier: ATR multiple used for stop-loss placement
    """
    max_single_asset_allocation: float
    max_volatile_asset_allocation: float
    max_drawdown: float
    sharpe_ratio_threshold: float
    risk_multiplier: float
    stop_multiplier: float


def _build_tolerance_table(raw: Mapping[str, Any]) -> dict[RiskTolerance, ToleranceLimits]:
    table = {}
    for tolerance in RiskTolerance:
        try:
            table[tolerance] = ToleranceLimits(**raw[tolerance.value])
        except (KeyError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid tolerance limits for '{tolerance.value}': {e}"
            ) from e
    return table


TOLERANCE_LIMITS: dict[RiskTolerance, ToleranceLimits] = _build_tolerance_table(
    load_risk_profiles()["tolerance_limits"]
)


def get_tolerance_limits(tolerance: RiskTolerance | str) -> ToleranceLimits:
    """
    Get the limits for a tolerance level.

    Args:
        tolerance: Tolerance member or any of its names
            (conservative/moderate/aggressive or low/medium/high)

    Returns:
        Limits for the tolerance
    """
    return TOLERANCE_LIMITS[RiskTolerance(tolerance)]


class StaticRiskProfileProvider:
    """
    Risk profile provider backed by a fixed lookup table.

    Lookups are case-insensitive and resolve ticker aliases (``BTC`` to
    ``bitcoin``). Unknown symbols get a neutral default profile.

    Example:
        provider = StaticRiskProfileProvider()
        provider.profile("BTC").volatility  # 0.7
    """

    def __init__(
        self,
        profiles: Mapping[str, Mapping[str, float]] | None = None,
        aliases: Mapping[str, str] | None = None,
        default_value: float | None = None,
    ):
        """
        Initialize provider.

        Args:
            profiles: Profile table (None = load from configuration)
            aliases: Ticker to profile-key aliases (None = load from configuration)
            default_value: Score used for every field of unknown symbols
        """
        if profiles is None or aliases is None:
            raw = load_risk_profiles()
            profiles = raw["asset_profiles"] if profiles is None else profiles
            aliases = raw.get("aliases", {}) if aliases is None else aliases

        self._profiles = {
            key.lower(): AssetRiskProfile(**values) for key, values in profiles.items()
        }
        self._aliases = {key.lower(): value.lower() for key, value in aliases.items()}

        default = settings.risk.default_profile_value if default_value is None else default_value
        self._default = AssetRiskProfile(
            volatility=default,
            correlation=default,
            liquidity=default,
        )

    @property
    def default_profile(self) -> AssetRiskProfile:
        return self._default

    def profile(self, symbol: str) -> AssetRiskProfile:
        """Get the risk profile for a symbol."""
        key = symbol.lower()
        key = self._aliases.get(key, key)
        found = self._profiles.get(key)
        if found is None:
            logger.debug(f"No risk profile for {symbol}, using default")
            return self._default
        return found

    def __contains__(self, symbol: str) -> bool:
        key = symbol.lower()
        return self._aliases.get(key, key) in self._profiles
