"""Configuration models for webhook_validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from webhook_validator.models.keys import DEFAULT_KEY_LABEL, SECRET_KEY_FILE_FIELD


@dataclass
class ValidatorConfig:
    """Which secret key files to load.

    ``builders`` are kept as plain mappings so that custom label functions
    can read any field from them.
    """

    default_key_file: str | None = None
    builders: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.default_key_file is not None and not isinstance(self.default_key_file, str):
            raise ValueError(f"{SECRET_KEY_FILE_FIELD} must be a string")

        for idx, builder in enumerate(self.builders):
            if not isinstance(builder, dict):
                raise ValueError(f"builders[{idx}] must be a mapping, got {type(builder).__name__}")

            key_file = builder.get(SECRET_KEY_FILE_FIELD)
            if key_file is not None and not isinstance(key_file, str):
                raise ValueError(f"builders[{idx}].{SECRET_KEY_FILE_FIELD} must be a string")

            branch = builder.get("branch")
            if branch is not None and not isinstance(branch, str):
                raise ValueError(
                    f"builders[{idx}].branch must be a string, got {type(branch).__name__}"
                )

            if branch == DEFAULT_KEY_LABEL:
                raise ValueError(
                    f"builders[{idx}] uses the reserved branch name {DEFAULT_KEY_LABEL!r}"
                )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ValidatorConfig:
        """Create a configuration from a parsed config file.

        Args:
            config: Configuration dictionary (e.g., from a YAML file).

        Returns:
            ValidatorConfig instance.
        """
        builders = config.get("builders") or []
        if not isinstance(builders, list):
            raise ValueError(f"builders must be a list, got {type(builders).__name__}")

        return cls(
            default_key_file=config.get(SECRET_KEY_FILE_FIELD),
            builders=builders,
        )

    @classmethod
    def default(cls) -> ValidatorConfig:
        """Create an empty configuration (no secrets, validation is a no-op)."""
        return cls()
