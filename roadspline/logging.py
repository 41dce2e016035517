"""
Logging system for roadspline.

This module provides:
- Configurable log levels via environment variables
- JSON formatting option
- Performance profiling utilities
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import numpy as np

# Type variable for generic function wrapping
F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Log Level Configuration
# =============================================================================

LOG_LEVEL_ENV = "ROADSPLINE_LOG_LEVEL"
LOG_FORMAT_ENV = "ROADSPLINE_LOG_FORMAT"
LOG_FILE_ENV = "ROADSPLINE_LOG_FILE"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_log_format() -> str:
    """Get log format from environment variable."""
    format_type = os.environ.get(LOG_FORMAT_ENV, "default").lower()
    if format_type == "json":
        return JSON_FORMAT
    return DEFAULT_FORMAT


def get_log_file() -> Optional[str]:
    """Get log file path from environment variable."""
    return os.environ.get(LOG_FILE_ENV)


# =============================================================================
# Logger Setup
# =============================================================================

_root_logger: Optional[logging.Logger] = None
_handlers: list = []


def setup_logging(
    level: Optional[int] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Setup the roadspline logging system.

    Args:
        level: Log level (default: from env or INFO).
        format_str: Log format string (default: from env or DEFAULT_FORMAT).
        log_file: Optional file to write logs to.
        force: Force reconfiguration even if already setup.

    Returns:
        Configured root logger.
    """
    global _root_logger, _handlers

    if _root_logger is not None and not force:
        return _root_logger

    if _root_logger is not None:
        for handler in _handlers:
            _root_logger.removeHandler(handler)
            handler.close()
    _handlers = []

    _root_logger = logging.getLogger("roadspline")
    _root_logger.setLevel(level or get_log_level())
    _root_logger.propagate = False

    formatter = logging.Formatter(format_str or get_log_format())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    _root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    file_path = log_file or get_log_file()
    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        _root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    return _root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'roadspline.').
              If None, returns root roadspline logger.

    Returns:
        Logger instance.
    """
    if _root_logger is None:
        setup_logging()

    if name:
        return logging.getLogger(f"roadspline.{name}")
    return _root_logger


# =============================================================================
# Convenience Functions
# =============================================================================


def LOG_DEBUG(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a debug message."""
    get_logger().debug(msg, *args, **kwargs)


def LOG_INFO(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log an info message."""
    get_logger().info(msg, *args, **kwargs)


def LOG_WARN(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a warning message."""
    get_logger().warning(msg, *args, **kwargs)


def LOG_ERROR(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log an error message."""
    get_logger().error(msg, *args, **kwargs)


# =============================================================================
# Performance Profiling
# =============================================================================


@contextmanager
def profile_scope(name: str, log_level: int = logging.DEBUG):
    """Context manager for profiling code execution time.

    Example:
        with profile_scope("fit"):
            spline.fit()
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start_time
        get_logger().log(log_level, f"{name} took {elapsed:.4f}s")


def timed(func: F) -> F:
    """Decorator logging the execution time of ``func`` at debug level."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start_time
            get_logger().debug(f"{func.__name__} took {elapsed:.4f}s")

    return wrapper  # type: ignore


class TimeTracker:
    """Track execution times for performance analysis.

    Example:
        tracker = TimeTracker("solve")
        for _ in range(100):
            with tracker.measure():
                solve(A, b)
        tracker.print_stats()
    """

    def __init__(self, name: str):
        self.name = name
        self._times: list[float] = []

    def add(self, timing_ms: float) -> None:
        """Add a timing measurement in milliseconds."""
        self._times.append(timing_ms)

    @contextmanager
    def measure(self):
        """Context manager for measuring execution time."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self._times.append(elapsed_ms)

    def get_stats(self) -> tuple[float, float, int]:
        """Get timing statistics.

        Returns:
            Tuple of (mean_ms, max_ms, count).
        """
        if not self._times:
            return 0.0, 0.0, 0

        return float(np.mean(self._times)), float(np.max(self._times)), len(self._times)

    def print_stats(self) -> None:
        """Log timing statistics at info level."""
        mean, max_val, count = self.get_stats()
        if count == 0:
            LOG_INFO(f"--- No timing data for {self.name} ---")
            return

        LOG_INFO(f"--- Computation Times: {self.name} ---")
        LOG_INFO(f"  Mean: {mean:.3f} ms")
        LOG_INFO(f"  Max: {max_val:.3f} ms")
        LOG_INFO(f"  Count: {count}")

    def reset(self) -> None:
        """Reset timing data."""
        self._times = []


# =============================================================================
# Module Initialization
# =============================================================================

setup_logging()
