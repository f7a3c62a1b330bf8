"""Per-request webhook validation hook and ASGI middleware."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from starlette.responses import JSONResponse

from webhook_validator.models.keys import DEFAULT_KEY_LABEL
from webhook_validator.utils.logging import get_logger
from webhook_validator.webhook.labels import parse_key_label_from_branch
from webhook_validator.webhook.validators import ValidationError, validate_payload

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from starlette.types import ASGIApp, Message, Receive, Scope, Send

    from webhook_validator.models.keys import KeyDictionary
    from webhook_validator.webhook.labels import KeyLabelParser

logger = get_logger("webhook.middleware")

DELIVERY_HEADER = "x-github-delivery"
SIGNATURE_HEADER = "x-hub-signature"
UNKNOWN_WEBHOOK_ID = "<unknown>"


class InboundRequest(Protocol):
    """The parts of an HTTP request the validation hook reads."""

    headers: Mapping[str, str]
    ip: str | None


class RequestValidator:
    """Validates each inbound webhook against a prebuilt key dictionary.

    The dictionary is only read, so a single validator can be shared across
    concurrent requests.
    """

    def __init__(
        self,
        key_dictionary: KeyDictionary,
        parse_key_label_from_body: KeyLabelParser | None = None,
    ) -> None:
        self.key_dictionary = key_dictionary
        self.parse_key_label_from_body = parse_key_label_from_body or parse_key_label_from_branch

    def check(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        ip: str | None = None,
    ) -> ValidationError | None:
        """Validate a request without raising.

        Args:
            headers: Request headers, matched case-insensitively.
            raw_body: The request body exactly as received.
            ip: The client address, reported on failure.

        Returns:
            None if the request is valid, else the ValidationError describing it.
        """
        lower_headers = {k.lower(): v for k, v in headers.items()}
        webhook_id = lower_headers.get(DELIVERY_HEADER) or UNKNOWN_WEBHOOK_ID
        signature = lower_headers.get(SIGNATURE_HEADER)

        key_label = self.parse_key_label_from_body(raw_body) or DEFAULT_KEY_LABEL
        secret_key = self.key_dictionary.get(key_label) or self.key_dictionary.get(
            DEFAULT_KEY_LABEL
        )

        if validate_payload(raw_body, signature, secret_key):
            return None

        logger.warning(
            "Webhook signature validation failed",
            extra={"key_label": key_label, "delivery_id": webhook_id, "ip": ip},
        )
        return ValidationError(key_label, webhook_id, ip)

    def __call__(
        self,
        request: InboundRequest,
        response: Any,  # noqa: ARG002
        buf: bytes | str,
        encoding: str | None = None,
    ) -> None:
        """Body-parser hook: raise before the body is parsed if it is not valid.

        Args:
            request: The inbound request.
            response: The response handle (unused, part of the hook interface).
            buf: The raw request body.
            encoding: Text encoding used when ``buf`` is a str.

        Raises:
            ValidationError: If the request fails validation.
        """
        raw_body = buf.encode(encoding or "utf-8") if isinstance(buf, str) else buf
        error = self.check(request.headers, raw_body, request.ip)
        if error is not None:
            raise error


def middleware_validator(
    key_dictionary: KeyDictionary,
    parse_key_label_from_body: KeyLabelParser | None = None,
) -> RequestValidator:
    """Create the body-parser validation hook for a key dictionary."""
    return RequestValidator(key_dictionary, parse_key_label_from_body)


class WebhookValidationMiddleware:
    """ASGI middleware that rejects unsigned or mis-signed webhook requests.

    The body is buffered and validated before the wrapped app sees it, then
    replayed unchanged so the signature is always checked on the raw bytes.
    """

    def __init__(
        self,
        app: ASGIApp,
        validator: RequestValidator,
        path_prefixes: Sequence[str] = ("/",),
    ) -> None:
        self.app = app
        self.validator = validator
        self.path_prefixes = tuple(path_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._covers(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        raw_body = await _read_body(receive)
        headers = {k.decode("latin-1"): v.decode("latin-1") for k, v in scope.get("headers", [])}
        client = scope.get("client")
        ip = client[0] if client else None

        error = self.validator.check(headers, raw_body, ip)
        if error is not None:
            response = JSONResponse(
                {"error": "invalid_signature", "message": str(error)},
                status_code=403,
            )
            await response(scope, receive, send)
            return

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if replayed:
                return await receive()
            replayed = True
            return {"type": "http.request", "body": raw_body, "more_body": False}

        await self.app(scope, replay, send)

    def _covers(self, path: str) -> bool:
        # Prefixes match whole path segments: "/webhook" covers "/webhook/x", not "/webhooks"
        return any(
            path == prefix or path.startswith(prefix.rstrip("/") + "/")
            for prefix in self.path_prefixes
        )


async def _read_body(receive: Receive) -> bytes:
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)
