"""Core infrastructure — config, exceptions, logging, entity stores, CLI."""

from .config import Config, get_config, reset_config
from .exceptions import (
    ConfigurationError,
    DataProcessingError,
    FinStateError,
    ReconciliationError,
)

__all__ = [
    "Config",
    "ConfigurationError",
    "DataProcessingError",
    "FinStateError",
    "ReconciliationError",
    "get_config",
    "reset_config",
]
