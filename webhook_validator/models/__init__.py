"""Data models for webhook_validator."""

from webhook_validator.models.config import ValidatorConfig
from webhook_validator.models.keys import (
    DEFAULT_KEY_LABEL,
    SECRET_KEY_FILE_FIELD,
    KeyDictionary,
    KeyEntry,
    KeyFileEntry,
    freeze_key_dictionary,
)

__all__ = [
    "DEFAULT_KEY_LABEL",
    "SECRET_KEY_FILE_FIELD",
    "KeyDictionary",
    "KeyEntry",
    "KeyFileEntry",
    "ValidatorConfig",
    "freeze_key_dictionary",
]
