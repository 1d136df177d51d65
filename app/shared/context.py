"""Request context using contextvars.

Holds the request id and the caller (user id, site scope) of the current
request so log records can carry them without passing them around.

Usage:
    token = bind_request_context(request_id="abc", user_id="u1", site_id="s1")
    ...
    reset_request_context(token)
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current request context."""

    request_id: str | None = None
    user_id: str | None = None
    site_id: str | None = None


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("request_context", default=_EMPTY)


def bind_request_context(
    request_id: str | None,
    user_id: str | None = None,
    site_id: str | None = None,
) -> Token:
    """Set the context for this request; pass the token to reset_request_context."""
    return _current.set(
        RequestContext(request_id=request_id, user_id=user_id, site_id=site_id)
    )


def reset_request_context(token: Token) -> None:
    _current.reset(token)


def get_request_context() -> RequestContext:
    """Return the current context (all fields None outside a request)."""
    return _current.get()
