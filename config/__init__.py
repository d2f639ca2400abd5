"""
Configuration module for the Cryptofolio risk engine.

This module provides centralized configuration management including:
- Global settings (settings.py)
- Asset risk profiles and tolerance tables (risk_profiles.yaml)
"""

from functools import lru_cache

import yaml

from config.settings import (
    PROJECT_ROOT,
    CONFIG_DIR,
    Settings,
    get_settings,
    settings,
)


def load_yaml_config(config_name: str) -> dict:
    """
    Load a YAML configuration file.

    Args:
        config_name: Name of the config file (with or without .yaml extension)

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    if not config_name.endswith(".yaml"):
        config_name = f"{config_name}.yaml"

    config_path = CONFIG_DIR / config_name

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@lru_cache(maxsize=1)
def load_risk_profiles() -> dict:
    """Load the asset risk profile and tolerance tables."""
    return load_yaml_config("risk_profiles")


__all__ = [
    "PROJECT_ROOT",
    "CONFIG_DIR",
    "Settings",
    "get_settings",
    "settings",
    "load_yaml_config",
    "load_risk_profiles",
]
