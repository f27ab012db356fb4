"""
Error logging middleware.

Observes exceptions escaping the application, logs them with the full request
context (correlation id, client metadata, user id, body, path params, query)
and re-raises them unchanged so the framework's error responder still runs.
Exceptions already turned into responses (HTTPException, validation errors)
never reach this layer.
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import parse_qsl

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from opsdesk.middleware.context import (
    authenticated_user_id,
    describe_request,
    get_header,
    multi_dict,
    query_dict,
    scope_state,
)
from opsdesk.utils.logging import get_logger, log_event, redact_sensitive

logger = get_logger(__name__)

DEFAULT_MAX_BODY_BYTES = 64 * 1024
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def unparsed(size: int) -> str:
    return f"[UNPARSED {size} bytes]"


def decode_body(raw: bytes, content_type: str = "", size: Optional[int] = None) -> Optional[Any]:
    """
    Decode a captured body for logging.

    JSON and url-encoded form bodies are returned as structures with
    secrets redacted. Anything else (multipart, plain text, a body cut off
    at the capture limit, undecodable bytes) is logged as a size
    placeholder, never as raw text.

    Args:
        raw: Captured body bytes
        content_type: Request Content-Type header
        size: Total body size when larger than the captured bytes
    """
    if not raw:
        return None
    total = size if size is not None else len(raw)
    if total > len(raw):
        return unparsed(total)

    if content_type.startswith(FORM_CONTENT_TYPE):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return unparsed(total)
        return redact_sensitive(multi_dict(parse_qsl(text, keep_blank_values=True)))

    try:
        return redact_sensitive(json.loads(raw))
    except ValueError:
        return unparsed(total)


class ErrorLoggingMiddleware:
    """
    Pure ASGI middleware logging unhandled request errors.

    The request body is captured as it is read by the application (up to
    max_body_bytes) through a wrapped receive callable.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int = DEFAULT_MAX_BODY_BYTES) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        body = bytearray()
        body_size = 0

        async def receive_wrapper() -> Message:
            nonlocal body_size
            message = await receive()
            if message["type"] == "http.request":
                body_size += len(message.get("body", b""))
                room = self.max_body_bytes - len(body)
                if room > 0:
                    body.extend(message.get("body", b"")[:room])
            return message

        try:
            await self.app(scope, receive_wrapper, send)
        except Exception as exc:
            state = scope_state(scope)
            log_event(
                logger,
                logging.ERROR,
                "Request error occurred",
                category="error",
                exc_info=exc,
                request_id=state.get("request_id"),
                user_id=authenticated_user_id(scope),
                body=decode_body(bytes(body), get_header(scope, "content-type") or "", body_size),
                params=dict(scope.get("path_params") or {}),
                query=query_dict(scope),
                error={"type": type(exc).__name__, "message": str(exc)},
                **describe_request(scope),
            )
            raise
