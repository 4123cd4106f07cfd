"""Shared utilities for element queries.

This module provides configuration objects, metrics types and logging
helpers used across the tree, path and api layers.
"""

from .result import QueryMetrics
from .config import (
    ConfigError,
    ConfigValidationError,
    ConfigValueError,
    ElementQueryConfig,
    GlobalConfig,
    QueryConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    set_package_log_level,
)

__all__ = [
    "QueryMetrics",
    "ConfigError",
    "ConfigValidationError",
    "ConfigValueError",
    "ElementQueryConfig",
    "GlobalConfig",
    "QueryConfig",
    "CorrelationLogger",
    "get_logger",
    "set_package_log_level",
]
