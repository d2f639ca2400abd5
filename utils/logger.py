"""
Logging for the risk engine, built on loguru.

Handlers are configured from ``LoggingSettings``: a colorized console sink
and an optional rotating file sink share one format string. Modules obtain
a name-bound logger through ``get_logger(__name__)``; long calculations are
timed through ``perf_logger``.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from config.settings import LoggingSettings, settings


def setup_logging(config: LoggingSettings | None = None, **overrides: Any) -> LoggingSettings:
    """
    Replace all loguru handlers with ones built from ``config``.

    Args:
        config: Logging section; defaults to ``settings.logging``
        **overrides: Field overrides applied on top of ``config``
            (level, format, log_file, rotation, retention, serialize, console)

    Returns:
        The effective logging configuration
    """
    config = config or settings.logging
    if overrides:
        config = config.model_copy(update=overrides)

    logger.remove()

    if config.console:
        logger.add(sys.stderr, level=config.level, format=config.format, colorize=True)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=config.level,
            format=config.format,
            rotation=config.rotation,
            retention=config.retention,
            compression="gz",
            serialize=config.serialize,
        )

    return config


def get_logger(name: str | None = None) -> "logger":
    """Logger bound to ``name`` (usually the caller's ``__name__``)."""
    if name:
        return logger.bind(name=name)
    return logger


class PerformanceLogger:
    """
    Timing log for expensive calculations such as Monte Carlo runs.

    Runs slower than ``slow_threshold_ms`` are logged as warnings, the rest
    at debug level.
    """

    def __init__(self, slow_threshold_ms: float = 1000.0) -> None:
        self._logger = logger.bind(category="performance")
        self.slow_threshold_ms = slow_threshold_ms

    def log_timing(self, operation: str, duration_ms: float, **kwargs: Any) -> None:
        """
        Log one timing sample.

        Args:
            operation: Name of the calculation
            duration_ms: Duration in milliseconds
            **kwargs: Extra fields attached to the record
        """
        if duration_ms > self.slow_threshold_ms:
            self._logger.warning(f"SLOW | {operation} | {duration_ms:.2f}ms", operation=operation, **kwargs)
        else:
            self._logger.debug(f"TIMING | {operation} | {duration_ms:.2f}ms", operation=operation, **kwargs)

    @contextmanager
    def timed(self, operation: str, **kwargs: Any) -> Iterator[None]:
        """Time the enclosed block and log it under ``operation``."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.log_timing(operation, (time.perf_counter() - start) * 1000, **kwargs)


setup_logging()

perf_logger = PerformanceLogger()
