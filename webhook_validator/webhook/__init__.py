"""Webhook request validation."""

from webhook_validator.webhook.labels import (
    ConfigLabelParser,
    KeyLabelParser,
    parse_key_label_from_branch,
    parse_key_label_from_config,
)
from webhook_validator.webhook.middleware import (
    InboundRequest,
    RequestValidator,
    WebhookValidationMiddleware,
    middleware_validator,
)
from webhook_validator.webhook.validators import ValidationError, validate_payload

__all__ = [
    "ConfigLabelParser",
    "InboundRequest",
    "KeyLabelParser",
    "RequestValidator",
    "ValidationError",
    "WebhookValidationMiddleware",
    "middleware_validator",
    "parse_key_label_from_branch",
    "parse_key_label_from_config",
    "validate_payload",
]
