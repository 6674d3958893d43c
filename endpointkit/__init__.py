"""
endpointkit — Minimal HTTP Serving Helpers
==========================================

Glue over Starlette for JSON APIs:

    ┌─────────────────────────────────────┐
    │        CORS gate (middleware)       │  ← whole app, once
    ├─────────────────────────────────────┤
    │     Server (router + fault handler) │  ← params → Context
    ├─────────────────────────────────────┤
    │  Endpoint decorators (EndpointConfig)│  ← logger, timeout, limit_up
    ├─────────────────────────────────────┤
    │              Endpoint               │  ← decode_body / retrieve_params
    ├─────────────────────────────────────┤
    │     JSONResult → ResponseWriter     │  ← envelope responses
    └─────────────────────────────────────┘

    from endpointkit import EndpointConfig, Server, logger, result_response, retrieve_params

    async def get_note(ctx, w, request):
        result_response(w, {"id": retrieve_params(ctx)["id"]})

    server = Server()
    server.add_endpoint("GET", "/notes/{id}", EndpointConfig([logger]).apply(get_note))
"""

from endpointkit.body import BUFFERMAX, MB, READLIMIT, decode_body
from endpointkit.config import config_value, require_config
from endpointkit.context import Canceled, Context, DeadlineExceeded, background
from endpointkit.decorators import (
    Endpoint,
    EndpointConfig,
    EndpointDecorator,
    limit_body,
    limit_up,
    logger,
    timeout,
    timeout_after,
)
from endpointkit.middleware.cors import CORSGateMiddleware
from endpointkit.params import attach_params, retrieve_params
from endpointkit.responses import (
    error_response,
    no_access,
    result_response,
    size_response,
    write_error,
)
from endpointkit.schemas.result import JSONResult
from endpointkit.server import Server
from endpointkit.writer import ResponseWriter

__version__ = "1.0.0"

__all__ = [
    "BUFFERMAX",
    "CORSGateMiddleware",
    "Canceled",
    "Context",
    "DeadlineExceeded",
    "Endpoint",
    "EndpointConfig",
    "EndpointDecorator",
    "JSONResult",
    "MB",
    "READLIMIT",
    "ResponseWriter",
    "Server",
    "attach_params",
    "background",
    "config_value",
    "decode_body",
    "error_response",
    "limit_body",
    "limit_up",
    "logger",
    "no_access",
    "require_config",
    "result_response",
    "retrieve_params",
    "size_response",
    "timeout",
    "timeout_after",
    "write_error",
]
