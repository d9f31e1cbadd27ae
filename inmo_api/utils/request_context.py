"""Request-scoped identifiers shared by middleware, handlers and logs.

The middleware in :mod:`inmo_api.main` stores the inbound ``X-Request-ID`` (or
a freshly generated UUID) in a ``ContextVar`` so error payloads can echo it
without threading the request object through every call.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "REQUEST_ID_HEADER",
    "clear_request_id",
    "get_request_id",
    "new_request_id",
    "set_request_id",
]

REQUEST_ID_HEADER = "X-Request-ID"

REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return str(uuid.uuid4())


def set_request_id(request_id: str) -> Token[str]:
    """Store ``request_id`` for the running task and return the reset token."""

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the active request id, or an empty string outside a request."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")
