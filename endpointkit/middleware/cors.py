"""
endpointkit — CORS Gate
=======================

What:  Transport-level middleware that answers CORS preflights and tags every
       response with cross-origin headers.
How:   Wraps the whole ASGI app once (not per route).
       Every response:
           Vary: Origin                       (appended)
           Access-Control-Allow-Origin: <the request's Origin, echoed>
       OPTIONS (preflight) additionally:
           Vary: Access-Control-Request-Method
           Vary: Access-Control-Request-Headers
           Access-Control-Allow-Methods: <requested method, upper-cased>
           Access-Control-Allow-Headers: authorization
       and is answered 200 with an empty body; the wrapped app never sees it.

There is no allow-list: any origin is echoed back. Put the gate in front of
services that are meant to be callable from any browser origin.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOWED_HEADERS = "authorization"


def _allow_origin(response: Response, origin: str) -> None:
    response.headers.append("Vary", "Origin")
    response.headers["Access-Control-Allow-Origin"] = origin


class CORSGateMiddleware(BaseHTTPMiddleware):
    """Echo-origin CORS handling with preflight short-circuit."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("Origin", "")

        if request.method == "OPTIONS":
            response = Response(status_code=200)
            _allow_origin(response, origin)
            response.headers.append("Vary", "Access-Control-Request-Method")
            response.headers.append("Vary", "Access-Control-Request-Headers")
            response.headers["Access-Control-Allow-Methods"] = request.headers.get(
                "Access-Control-Request-Method", ""
            ).upper()
            response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
            return response

        response = await call_next(request)
        _allow_origin(response, origin)
        return response
