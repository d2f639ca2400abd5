"""
Portfolio rebalancing recommendations.

This module turns the difference between current and target weights into
prioritized buy/sell actions. Drifts below the materiality threshold are
ignored.
"""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from config import settings
from core.enums import RebalanceAction, RebalancePriority
from core.types import Asset, RebalanceRecommendation
from core.validation import validate_weights_sum


class Rebalancer:
    """
    Threshold-based rebalance recommender.

    Example:
        recs = Rebalancer().recommend(current_assets, target_assets)
    """

    def __init__(
        self,
        materiality_threshold: float | None = None,
        high_priority_threshold: float | None = None,
        medium_priority_threshold: float | None = None,
    ) -> None:
        """
        Initialize the rebalancer.

        Args:
            materiality_threshold: Smallest drift that produces a trade
            high_priority_threshold: Drift above which priority is high
            medium_priority_threshold: Drift above which priority is medium
        """
        cfg = settings.rebalance
        self.materiality_threshold = (
            cfg.materiality_threshold if materiality_threshold is None else materiality_threshold
        )
        self.high_priority_threshold = (
            cfg.high_priority_threshold if high_priority_threshold is None else high_priority_threshold
        )
        self.medium_priority_threshold = (
            cfg.medium_priority_threshold if medium_priority_threshold is None else medium_priority_threshold
        )
        self.weight_sum_tolerance = cfg.weight_sum_tolerance

    def priority_for(self, drift: float) -> RebalancePriority:
        """Map an absolute drift to a priority."""
        if drift > self.high_priority_threshold:
            return RebalancePriority.HIGH
        if drift > self.medium_priority_threshold:
            return RebalancePriority.MEDIUM
        return RebalancePriority.LOW

    def recommend(
        self,
        current_assets: Sequence[Asset],
        target_assets: Sequence[Asset],
    ) -> list[RebalanceRecommendation]:
        """
        Diff current against target weights.

        Args:
            current_assets: Assets carrying current weights
            target_assets: Assets carrying target weights (matched by symbol)

        Returns:
            Recommendations sorted high -> medium -> low priority; ties keep
            the order of ``current_assets``

        Raises:
            WeightNormalizationError: If target weights do not sum to 1
        """
        validate_weights_sum(
            [asset.weight for asset in target_assets],
            tolerance=self.weight_sum_tolerance,
        )

        targets = {asset.symbol: asset.weight for asset in target_assets}
        recommendations = []

        for current in current_assets:
            if current.symbol not in targets:
                logger.warning(f"No target weight for {current.symbol}, skipping")
                continue

            target_weight = targets[current.symbol]
            drift = target_weight - current.weight

            if abs(drift) < self.materiality_threshold:
                continue

            recommendations.append(
                RebalanceRecommendation(
                    symbol=current.symbol,
                    current_weight=current.weight,
                    target_weight=target_weight,
                    action=RebalanceAction.BUY if drift > 0 else RebalanceAction.SELL,
                    amount=abs(drift),
                    priority=self.priority_for(abs(drift)),
                )
            )

        # sorted() is stable, so equal priorities keep input order
        recommendations = sorted(recommendations, key=lambda r: r.priority.rank, reverse=True)

        logger.debug(f"Rebalance: {len(recommendations)} of {len(current_assets)} assets need trades")

        return recommendations


def generate_rebalance_recommendations(
    current_assets: Sequence[Asset],
    target_assets: Sequence[Asset],
) -> list[RebalanceRecommendation]:
    """Recommend trades using the configured thresholds."""
    return Rebalancer().recommend(current_assets, target_assets)
