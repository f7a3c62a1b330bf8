"""Utility modules for webhook_validator."""

from webhook_validator.utils.config_loader import (
    ConfigLoaderError,
    load_config_from_env,
    load_validator_config,
)
from webhook_validator.utils.logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "ConfigLoaderError",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
    "load_config_from_env",
    "load_validator_config",
]
