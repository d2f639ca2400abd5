"""
Global settings and configuration management for the Cryptofolio risk engine.

This module provides centralized configuration using Pydantic for validation
and environment variable support.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
CONFIG_DIR = Path(__file__).parent.resolve()


class OptimizerSettings(BaseSettings):
    """Weight optimizer and portfolio constructor settings."""

    model_config = SettingsConfigDict(
        env_prefix="CRYPTOFOLIO_OPTIMIZER_",
        env_file=".env",
        extra="ignore"
    )

    risk_free_rate: float = 0.02  # 2% annual risk-free rate

    # Weight box applied before the final renormalization
    min_weight: float = 0.05
    max_weight: float = 0.40

    correlation_penalty: float = 0.3
    return_adjustment_floor: float = 0.1
    aggressive_volatility_boost: float = 1.2

    # Currency units per unit of weight*price when valuing a portfolio
    unit_scale: float = 100.0
    drawdown_multiplier: float = 2.5

    @field_validator("max_weight")
    @classmethod
    def check_weight_box(cls, v: float) -> float:
        """Reject a weight ceiling outside (0, 1]."""
        if not 0 < v <= 1:
            raise ValueError(f"max_weight must be in (0, 1], got {v}")
        return v


class RebalanceSettings(BaseSettings):
    """Rebalance recommender thresholds."""

    model_config = SettingsConfigDict(
        env_prefix="CRYPTOFOLIO_REBALANCE_",
        env_file=".env",
        extra="ignore"
    )

    materiality_threshold: float = 0.05  # Ignore drifts below 5%
    high_priority_threshold: float = 0.15
    medium_priority_threshold: float = 0.10
    weight_sum_tolerance: float = 1e-6


class RiskSettings(BaseSettings):
    """Account-level risk metric settings."""

    model_config = SettingsConfigDict(
        env_prefix="CRYPTOFOLIO_RISK_",
        env_file=".env",
        extra="ignore"
    )

    var_confidence: float = 0.95
    market_volatility: float = 0.8
    risk_free_rate: float = 0.02
    default_profile_value: float = 0.5

    # Alert thresholds
    concentration_alert: float = 50.0
    volatility_alert: float = 70.0
    drawdown_alert: float = 0.15
    liquidity_alert: float = 30.0

    # Profile volatility at or above which an asset counts as volatile
    volatile_asset_threshold: float = 0.8


class SimulationSettings(BaseSettings):
    """Monte Carlo simulation settings."""

    model_config = SettingsConfigDict(
        env_prefix="CRYPTOFOLIO_SIMULATION_",
        env_file=".env",
        extra="ignore"
    )

    simulations: int = Field(default=1000, ge=1)
    time_horizon: int = Field(default=252, ge=0)
    trading_days_per_year: int = 252

    # Random seed for reproducibility
    random_seed: int | None = 42


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CRYPTOFOLIO_LOG_",
        env_file=".env",
        extra="ignore"
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    log_file: Path | None = None
    rotation: str = "10 MB"
    retention: str = "30 days"
    serialize: bool = False  # JSON logging
    console: bool = True


class Settings(BaseSettings):
    """Main settings container combining all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    # Sub-settings
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    rebalance: RebalanceSettings = Field(default_factory=RebalanceSettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Environment
    environment: Literal["development", "testing", "production"] = "development"
    debug: bool = False


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
