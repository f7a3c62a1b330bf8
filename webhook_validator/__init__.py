"""Webhook payload signature validation with per-branch secret keys."""

__version__ = "0.1.0"

from webhook_validator.keys.loader import (  # noqa: E402
    FileReadError,
    get_key_files,
    load_key_dictionary,
    load_key_dictionary_async,
    load_key_file,
)
from webhook_validator.models.keys import DEFAULT_KEY_LABEL  # noqa: E402
from webhook_validator.webhook.labels import parse_key_label_from_branch  # noqa: E402
from webhook_validator.webhook.middleware import (  # noqa: E402
    RequestValidator,
    middleware_validator,
)
from webhook_validator.webhook.validators import ValidationError, validate_payload  # noqa: E402

__all__ = [
    "DEFAULT_KEY_LABEL",
    "FileReadError",
    "RequestValidator",
    "ValidationError",
    "__version__",
    "get_key_files",
    "load_key_dictionary",
    "load_key_dictionary_async",
    "load_key_file",
    "middleware_validator",
    "parse_key_label_from_branch",
    "validate_payload",
]
