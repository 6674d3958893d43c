"""
endpointkit — Server Facade
===========================

What:  Binds (method, path, endpoint) triples into a Starlette router and
       runs each matched request through its endpoint.
How:   For every matched request the route handler:
       1. derives a fresh Context carrying the matched path parameters
       2. stores it on `request.state.context`
       3. calls `endpoint(ctx, writer, request)`
       4. turns the buffered ResponseWriter into the response
Who:   Application code builds one Server, registers endpoints, and serves it
       (optionally behind the CORS gate, see `main.create_app`).

Fault handling:
    A router-level ExceptionMiddleware catches anything an endpoint raises:
        SizeError          → 417 envelope
        AccessError        → 401 envelope
        SerializationFault → 500 envelope, logged at CRITICAL
        anything else      → 500 envelope, logged with traceback
    Router misses are envelopes too: 404 for unknown paths, 405 (with Allow)
    for known paths hit with the wrong method.

    server = Server()
    server.add_endpoint("GET", "/notes/{id}", EndpointConfig([logger]).apply(get_note))
"""

import logging
from typing import List

from starlette.exceptions import HTTPException
from starlette.middleware.exceptions import ExceptionMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import BaseRoute, Router
from starlette.types import Receive, Scope, Send

from endpointkit.context import background
from endpointkit.decorators.chain import Endpoint
from endpointkit.exceptions import SerializationFault
from endpointkit.params import attach_params
from endpointkit.responses import write_error
from endpointkit.schemas.result import JSONResult
from endpointkit.writer import ResponseWriter

logger = logging.getLogger(__name__)


class Server:
    """ASGI application routing requests to endpoints."""

    def __init__(self) -> None:
        self.router = Router(redirect_slashes=False)
        self.app = ExceptionMiddleware(
            self.router,
            handlers={
                HTTPException: self._handle_http_error,
                Exception: self._handle_fault,
            },
        )

    @property
    def routes(self) -> List[BaseRoute]:
        return self.router.routes

    def add_endpoint(self, method: str, path: str, endpoint: Endpoint) -> None:
        """
        Register `endpoint` for `method` requests matching the `path` template.

        Path templates use Starlette syntax; named segments such as
        `/notes/{id}` become the params returned by `retrieve_params`.
        """
        method = method.upper()

        async def handle(request: Request) -> Response:
            params = {name: str(value) for name, value in request.path_params.items()}
            ctx = attach_params(background(), params)
            request.state.context = ctx
            w = ResponseWriter()
            await endpoint(ctx, w, request)
            return w.to_response()

        self.router.add_route(path, handle, methods=[method], name=f"{method} {path}")
        logger.info("Route registered: %s %s", method, path)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        # The router only raises HTTPException for 404/405 when an app is present
        # in the scope; otherwise it answers in plain text.
        scope["app"] = self
        await self.app(scope, receive, send)

    async def _handle_http_error(self, request: Request, exc: Exception) -> Response:
        assert isinstance(exc, HTTPException)
        w = ResponseWriter()
        for key, value in (exc.headers or {}).items():
            w.headers[key] = value
        JSONResult(success=False, status_code=exc.status_code, error=exc.detail).write(w)
        return w.to_response()

    async def _handle_fault(self, request: Request, exc: Exception) -> Response:
        w = ResponseWriter()
        if isinstance(exc, SerializationFault):
            logger.critical(
                "Response encoding failed for %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
            JSONResult(success=False, status_code=500, error=str(exc)).write(w)
        else:
            # write_error logs 500s itself.
            write_error(w, exc)
        return w.to_response()
