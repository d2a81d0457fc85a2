"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    HealthRulesError,
    InvalidInputError,
    ConfigurationError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "HealthRulesError",
    "InvalidInputError",
    "ConfigurationError",
]
