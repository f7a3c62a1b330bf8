"""Validator configuration loader."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from webhook_validator.models.config import ValidatorConfig
from webhook_validator.models.keys import SECRET_KEY_FILE_FIELD
from webhook_validator.utils.logging import get_logger

logger = get_logger("utils.config_loader")

# Environment variable naming the config file used by the server
CONFIG_PATH_ENV = "WEBHOOK_VALIDATOR_CONFIG"


class ConfigLoaderError(Exception):
    """Error raised when configuration loading fails."""

    pass


def load_validator_config(config_file: Path) -> ValidatorConfig:
    """Load the validator configuration from a YAML file.

    Relative key file paths are resolved against the config file's directory.
    An empty file yields the default (empty) configuration.

    Args:
        config_file: Path to the YAML config file.

    Returns:
        ValidatorConfig instance.

    Raises:
        ConfigLoaderError: If the file cannot be read or is invalid.
    """
    try:
        raw_config = _load_yaml_file(config_file)
    except OSError as e:
        raise ConfigLoaderError(f"Failed to read config file {config_file}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigLoaderError(f"Failed to parse config file {config_file}: {e}") from e

    if not raw_config:
        logger.debug("Config file is empty, using defaults", extra={"file": str(config_file)})
        return ValidatorConfig.default()

    if not isinstance(raw_config, dict):
        raise ConfigLoaderError(f"Invalid configuration in {config_file}: expected a mapping")

    try:
        config = ValidatorConfig.from_dict(raw_config)
    except ValueError as e:
        raise ConfigLoaderError(f"Invalid configuration in {config_file}: {e}") from e

    config = _resolve_key_paths(config, config_file.parent)
    logger.info(
        "Loaded configuration",
        extra={
            "file": str(config_file),
            "has_default_key": config.default_key_file is not None,
            "builders": len(config.builders),
        },
    )
    return config


def load_config_from_env() -> ValidatorConfig:
    """Load the configuration named by ``WEBHOOK_VALIDATOR_CONFIG``, if set."""
    config_path = os.environ.get(CONFIG_PATH_ENV, "")
    if not config_path:
        logger.debug("No config file configured, using defaults")
        return ValidatorConfig.default()
    return load_validator_config(Path(config_path))


def _resolve_key_paths(config: ValidatorConfig, base_dir: Path) -> ValidatorConfig:
    def resolve(path: str | None) -> str | None:
        if not path:
            return path
        return str(base_dir / path) if not Path(path).is_absolute() else path

    builders = []
    for builder in config.builders:
        resolved = dict(builder)
        if resolved.get(SECRET_KEY_FILE_FIELD):
            resolved[SECRET_KEY_FILE_FIELD] = resolve(resolved[SECRET_KEY_FILE_FIELD])
        builders.append(resolved)

    return ValidatorConfig(default_key_file=resolve(config.default_key_file), builders=builders)


def _load_yaml_file(filepath: Path) -> Any:
    """Load a YAML file.

    Args:
        filepath: Path to the YAML file.

    Returns:
        Parsed YAML content, or None if empty.

    Raises:
        yaml.YAMLError: If YAML is invalid.
        OSError: If file cannot be read.
    """
    content = filepath.read_text(encoding="utf-8")

    if not content.strip():
        return None

    return yaml.safe_load(content)
