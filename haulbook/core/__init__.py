"""
Core infrastructure for haulbook.

This module provides:
- Config: Business cost constants and environment settings
- Logging: structlog configuration
- Errors: Exception hierarchy
"""

from .config import ConfigManager, OperatingCosts, get_config
from .errors import HaulbookError, InvalidImportError, InvalidPeriodError, RecordNotFoundError

__all__ = [
    "ConfigManager",
    "OperatingCosts",
    "get_config",
    "HaulbookError",
    "InvalidImportError",
    "InvalidPeriodError",
    "RecordNotFoundError",
]
