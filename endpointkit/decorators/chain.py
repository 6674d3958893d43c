"""
endpointkit — Endpoint Decorator Chain
======================================

What:  Composes cross-cutting behaviours around a base endpoint.
How:   An EndpointConfig is an ordered tuple of decorators. `apply` folds it
       right-to-left, so the FIRST decorator listed is the OUTERMOST layer:

           EndpointConfig([d0, d1, d2]).apply(base) == d0(d1(d2(base)))

       Pre-logic runs d0 → d1 → d2 → base; post-logic unwinds
       base → d2 → d1 → d0.

    api = EndpointConfig([logger, timeout, limit_up])

    @api
    async def create_note(ctx, w, request):
        ...
"""

from functools import reduce
from typing import Awaitable, Callable, Iterable

from starlette.requests import Request

from endpointkit.context import Context
from endpointkit.writer import ResponseWriter

Endpoint = Callable[[Context, ResponseWriter, Request], Awaitable[None]]
EndpointDecorator = Callable[[Endpoint], Endpoint]


def _wrap(inner: Endpoint, decorate: EndpointDecorator) -> Endpoint:
    return decorate(inner)


class EndpointConfig(tuple):
    """
    Immutable ordered sequence of endpoint decorators.

    The same config can decorate any number of endpoints; each `apply`
    builds a new wrapper stack and never touches the endpoint it wraps.
    """

    def __new__(cls, decorators: Iterable[EndpointDecorator] = ()) -> "EndpointConfig":
        return super().__new__(cls, decorators)

    def apply(self, endpoint: Endpoint) -> Endpoint:
        return reduce(_wrap, reversed(self), endpoint)

    def __call__(self, endpoint: Endpoint) -> Endpoint:
        return self.apply(endpoint)

    def __repr__(self) -> str:
        names = ", ".join(getattr(d, "__name__", repr(d)) for d in self)
        return f"EndpointConfig([{names}])"
