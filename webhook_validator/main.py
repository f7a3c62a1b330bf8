"""Starlette application that validates webhook signatures before handling."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from webhook_validator import __version__
from webhook_validator.keys.loader import load_key_dictionary
from webhook_validator.utils.config_loader import load_config_from_env
from webhook_validator.utils.logging import configure_logging, get_logger
from webhook_validator.webhook.labels import parse_key_label_from_branch
from webhook_validator.webhook.middleware import (
    DELIVERY_HEADER,
    UNKNOWN_WEBHOOK_ID,
    WebhookValidationMiddleware,
    middleware_validator,
)

if TYPE_CHECKING:
    from starlette.requests import Request

    from webhook_validator.models.config import ValidatorConfig

logger = get_logger("main")


async def webhook_route(request: Request) -> JSONResponse:
    """Handle a webhook that already passed signature validation."""
    body = await request.body()
    delivery_id = request.headers.get(DELIVERY_HEADER, UNKNOWN_WEBHOOK_ID)

    try:
        json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Invalid JSON payload", extra={"error": str(e), "delivery_id": delivery_id})
        return JSONResponse(
            {"error": "invalid_payload", "message": f"Invalid JSON: {e}"},
            status_code=400,
        )

    key_label = parse_key_label_from_branch(body)
    logger.info("Accepted webhook", extra={"delivery_id": delivery_id, "key_label": key_label})
    return JSONResponse(
        {"status": "ok", "delivery_id": delivery_id, "key_label": key_label},
    )


async def health_route(request: Request) -> JSONResponse:
    """Report that the server is up."""
    del request  # unused but required by Starlette routing
    return JSONResponse({"status": "healthy", "version": __version__})


def create_app(config: ValidatorConfig | None = None) -> Starlette:
    """Build the webhook server.

    The key dictionary is loaded once here, so a missing key file stops the
    server from starting.

    Args:
        config: Validator configuration. Read from ``WEBHOOK_VALIDATOR_CONFIG``
            when not given.

    Returns:
        The Starlette application.

    Raises:
        FileReadError: If a configured key file cannot be read.
    """
    if config is None:
        config = load_config_from_env()

    key_dictionary = load_key_dictionary(config.default_key_file, config.builders)
    validator = middleware_validator(key_dictionary)

    app = Starlette(
        routes=[
            Route("/webhook", webhook_route, methods=["POST"]),
            Route("/health", health_route, methods=["GET"]),
        ],
        middleware=[
            Middleware(
                WebhookValidationMiddleware,
                validator=validator,
                path_prefixes=("/webhook",),
            ),
        ],
    )
    return app


# For local development
if __name__ == "__main__":
    import uvicorn

    configure_logging()
    print(f"Starting webhook_validator v{__version__} on http://localhost:8000")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
