"""
Request-scoped correlation context and ASGI scope helpers.

The correlation context lives in the ASGI scope's "state" dict, which is the
same dict behind `request.state` for every Request built from that scope, so
middleware, dependencies and route handlers all see one context per request.
"""

import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, MutableMapping, Optional, Tuple

from starlette.datastructures import QueryParams
from starlette.types import Scope

Clock = Callable[[], float]


@dataclass(frozen=True)
class CorrelationContext:
    """
    Identity and timing of one request.

    Attributes:
        request_id: UUID4 string linking every log event of the request
        start_time: Wall-clock start (UTC), for log output
        started_at: Monotonic clock reading used to measure duration
    """
    request_id: str
    start_time: datetime
    started_at: float

    @classmethod
    def start(cls, clock: Clock = time.monotonic) -> "CorrelationContext":
        return cls(
            request_id=str(uuid.uuid4()),
            start_time=datetime.now(timezone.utc),
            started_at=clock(),
        )

    def elapsed_ms(self, clock: Clock = time.monotonic) -> float:
        return round((clock() - self.started_at) * 1000, 2)


def scope_state(scope: Scope) -> MutableMapping[str, Any]:
    return scope.setdefault("state", {})


def attach_correlation(scope: Scope, context: CorrelationContext) -> None:
    state = scope_state(scope)
    state["correlation"] = context
    state["request_id"] = context.request_id
    state["start_time"] = context.start_time


def get_correlation(scope: Scope) -> Optional[CorrelationContext]:
    return scope.get("state", {}).get("correlation")


def get_header(scope: Scope, name: str) -> Optional[str]:
    target = name.lower().encode("latin-1")
    for key, value in scope.get("headers", []):
        if key.lower() == target:
            return value.decode("latin-1")
    return None


def client_ip(scope: Scope) -> Optional[str]:
    """First X-Forwarded-For hop when present, else the ASGI peer address."""
    forwarded = get_header(scope, "x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    client = scope.get("client")
    if client:
        return client[0]
    return None


def request_url(scope: Scope) -> str:
    """Path plus query string, as the client sent it."""
    path = scope.get("path", "")
    query = scope.get("query_string", b"")
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


def authenticated_user_id(scope: Scope) -> Optional[str]:
    """User id from the authenticated-user attachment point (state.user), if any."""
    user = scope.get("state", {}).get("user")
    if user is None:
        return None
    if isinstance(user, dict):
        user_id = user.get("id") or user.get("user_id")
    else:
        user_id = getattr(user, "id", None) or getattr(user, "user_id", None)
    return str(user_id) if user_id is not None else None


def describe_request(scope: Scope) -> Dict[str, Any]:
    """Common log fields for a request."""
    return {
        "method": scope.get("method"),
        "url": request_url(scope),
        "ip": client_ip(scope),
        "user_agent": get_header(scope, "user-agent"),
    }


def multi_dict(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """
    Collapse multi-valued pairs into a dict.

    A key seen once maps to its value; a repeated key maps to the list of
    its values in arrival order.
    """
    data: Dict[str, Any] = {}
    for key, value in items:
        if key not in data:
            data[key] = value
        elif isinstance(data[key], list):
            data[key].append(value)
        else:
            data[key] = [data[key], value]
    return data


def query_dict(scope: Scope) -> Dict[str, Any]:
    return multi_dict(QueryParams(scope.get("query_string", b"")).multi_items())
