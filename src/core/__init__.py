"""
Core module: Configuration, logging, and exception handling.
"""

from .config import AssuranceDetectorConfig, Config, config
from .exceptions import AssuranceError, ConfigurationError
from .logging_config import setup_logging

__all__ = [
    "AssuranceDetectorConfig",
    "Config",
    "config",
    "AssuranceError",
    "ConfigurationError",
    "setup_logging",
]
