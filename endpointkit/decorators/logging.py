"""
endpointkit — Request Duration Logging
======================================

What:  Endpoint decorator that logs how long everything it wraps took.
How:   Measures wall-clock time with `time.perf_counter` around the wrapped
       call and logs it, rounded to whole milliseconds, once the call returns
       or raises. It does not inspect the response or the error.
When:  Usually first in an EndpointConfig, so the duration covers every
       inner decorator plus the base endpoint.

Log line:
    endpointkit.access: request took 12 ms
"""

import logging
import time
from functools import wraps

from starlette.requests import Request

from endpointkit.context import Context
from endpointkit.decorators.chain import Endpoint
from endpointkit.writer import ResponseWriter

access_logger = logging.getLogger("endpointkit.access")


def logger(endpoint: Endpoint) -> Endpoint:
    @wraps(endpoint)
    async def logged(ctx: Context, w: ResponseWriter, request: Request) -> None:
        start_time = time.perf_counter()
        try:
            await endpoint(ctx, w, request)
        finally:
            duration_ms = round((time.perf_counter() - start_time) * 1000)
            access_logger.info(
                "request took %d ms",
                duration_ms,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                },
            )

    return logged
