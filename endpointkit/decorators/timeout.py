"""
endpointkit — Request Deadline
==============================

What:  Endpoint decorator that gives the wrapped endpoint a context with a
       deadline TIMEOUT (50 ms) from invocation.
How:   1. Derives a child context with `ctx.with_timeout(...)`
       2. Starts a watcher task that logs why the child context ended
       3. Runs the wrapped endpoint with the child context
       4. On every exit path: cancels the child context (releasing its timer)
          and awaits the watcher, so no task outlives the request

Enforcement is advisory. When the deadline fires the wrapped endpoint keeps
running; only the context reports `DeadlineExceeded`. Endpoints that must stop
on time check `ctx.err`, call `ctx.check()` or race their work against
`ctx.wait()`:

    async def slow(ctx, w, request):
        for item in work:
            ctx.check()
            await process(item)
"""

import asyncio
import logging
from functools import wraps

from starlette.requests import Request

from endpointkit.context import Context, DeadlineExceeded
from endpointkit.decorators.chain import Endpoint, EndpointDecorator
from endpointkit.writer import ResponseWriter

logger = logging.getLogger(__name__)

TIMEOUT = 0.05


async def _watch(ctx: Context) -> None:
    err = await ctx.wait()
    if isinstance(err, DeadlineExceeded):
        logger.warning("error: %s", err)
    else:
        logger.debug("error: %s", err)


def timeout_after(seconds: float) -> EndpointDecorator:
    """Build a deadline decorator for an arbitrary number of seconds."""

    def decorate(endpoint: Endpoint) -> Endpoint:
        @wraps(endpoint)
        async def timed(ctx: Context, w: ResponseWriter, request: Request) -> None:
            ctx, cancel = ctx.with_timeout(seconds)
            watcher = asyncio.create_task(_watch(ctx))
            try:
                await endpoint(ctx, w, request)
            finally:
                cancel()
                await watcher

        return timed

    decorate.__name__ = f"timeout_after({seconds})"
    return decorate


def timeout(endpoint: Endpoint) -> Endpoint:
    return timeout_after(TIMEOUT)(endpoint)
