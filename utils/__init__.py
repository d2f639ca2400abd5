"""
Utility modules for the Cryptofolio risk engine.

This module provides common utilities including:
- Custom logging with loguru
- Division and clamping guards
"""

from utils.logger import get_logger, setup_logging, perf_logger
from utils.helpers import safe_divide, clamp

__all__ = [
    "get_logger",
    "setup_logging",
    "perf_logger",
    "safe_divide",
    "clamp",
]
