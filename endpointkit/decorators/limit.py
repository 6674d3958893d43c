"""
endpointkit — Request Body Size Limit
=====================================

What:  Endpoint decorator that caps request bodies at BUFFERMAX (5 MiB).
How:   Two layers:
       1. Declared length: a Content-Length above the cap is answered with a
          417 size envelope before any body is read; the wrapped endpoint is
          never called.
       2. Streaming cap: the wrapped endpoint receives a request whose ASGI
          receive channel counts body bytes and raises SizeError once more
          than the cap has arrived. This covers chunked bodies without a
          Content-Length and clients whose declared length is wrong.
"""

import logging
from functools import wraps
from typing import Optional

from starlette.requests import Request
from starlette.types import Message, Receive

from endpointkit.body import BUFFERMAX
from endpointkit.context import Context
from endpointkit.decorators.chain import Endpoint, EndpointDecorator
from endpointkit.exceptions import SizeError
from endpointkit.responses import size_response
from endpointkit.writer import ResponseWriter

logger = logging.getLogger(__name__)

TOO_BIG_MESSAGE = "post is too big"


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def capped_receive(receive: Receive, limit: int) -> Receive:
    """Wrap an ASGI receive callable so it raises SizeError past `limit` body bytes."""
    received = 0

    async def capped() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                raise SizeError(TOO_BIG_MESSAGE, limit=limit)
        return message

    return capped


def limit_body(max_bytes: int) -> EndpointDecorator:
    """Build a size-limit decorator for an arbitrary byte cap."""

    def decorate(endpoint: Endpoint) -> Endpoint:
        @wraps(endpoint)
        async def limited(ctx: Context, w: ResponseWriter, request: Request) -> None:
            declared = _declared_length(request)
            if declared is not None and declared > max_bytes:
                logger.warning(
                    "Rejected %s %s: declared body of %d bytes exceeds %d",
                    request.method,
                    request.url.path,
                    declared,
                    max_bytes,
                )
                size_response(w, SizeError(TOO_BIG_MESSAGE, limit=max_bytes))
                return
            capped = Request(request.scope, capped_receive(request.receive, max_bytes))
            await endpoint(ctx, w, capped)

        return limited

    decorate.__name__ = f"limit_body({max_bytes})"
    return decorate


def limit_up(endpoint: Endpoint) -> Endpoint:
    return limit_body(BUFFERMAX)(endpoint)
