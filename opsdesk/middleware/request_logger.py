"""
Request/response logging middleware.

For every HTTP request:
- START: assign a correlation id, record the start time, log "request_start"
- END: when the last response body message has been sent, log the
  "api_request" completion event (status, duration, user id) and, for
  requests slower than the threshold, an extra "performance" warning

The ASGI send callable is wrapped, not replaced: every message is forwarded
unchanged and the completion is logged after it has been sent, once per
request.
"""

import logging
import time
from typing import Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from opsdesk.middleware.context import (
    Clock,
    CorrelationContext,
    attach_correlation,
    authenticated_user_id,
    describe_request,
)
from opsdesk.utils.logging import get_logger, log_event

logger = get_logger(__name__)

DEFAULT_SLOW_REQUEST_THRESHOLD_MS = 1000


class RequestLoggerMiddleware:
    """
    Pure ASGI middleware logging the start and completion of each request.

    Args:
        app: Wrapped ASGI application
        slow_request_threshold_ms: Durations strictly above this value also
            emit a "performance" warning
        clock: Monotonic clock in seconds (injectable for tests)
    """

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold_ms: float = DEFAULT_SLOW_REQUEST_THRESHOLD_MS,
        clock: Clock = time.monotonic,
    ) -> None:
        self.app = app
        self.slow_request_threshold_ms = slow_request_threshold_ms
        self.clock = clock

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        context = CorrelationContext.start(self.clock)
        attach_correlation(scope, context)

        log_event(
            logger,
            logging.INFO,
            "Incoming request",
            category="request_start",
            request_id=context.request_id,
            **describe_request(scope),
        )

        status_code: Optional[int] = None
        completed = False

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, completed
            if message["type"] == "http.response.start":
                status_code = message["status"]

            await send(message)

            if (
                message["type"] == "http.response.body"
                and not message.get("more_body", False)
                and not completed
            ):
                completed = True
                self._log_completion(scope, context, status_code or 200)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            if not completed:
                completed = True
                self._log_completion(scope, context, 500)
            raise

    def _log_completion(self, scope: Scope, context: CorrelationContext, status_code: int) -> None:
        duration_ms = context.elapsed_ms(self.clock)
        request = describe_request(scope)

        log_event(
            logger,
            logging.INFO,
            f"{request['method']} {request['url']} - {status_code}",
            category="api_request",
            request_id=context.request_id,
            status_code=status_code,
            duration_ms=duration_ms,
            user_id=authenticated_user_id(scope),
            **request,
        )

        if duration_ms > self.slow_request_threshold_ms:
            log_event(
                logger,
                logging.WARNING,
                "Slow request detected",
                category="performance",
                request_id=context.request_id,
                method=request["method"],
                url=request["url"],
                duration_ms=duration_ms,
            )
