"""
endpointkit — Path Parameter Carrier
====================================

What:  Stores the router's path-parameter bindings on the request context
       and reads them back further down the endpoint chain.
How:   The mapping is copied into a read-only `MappingProxyType` and stored
       under a private key object. Only this module holds the key, so no
       other context user can collide with it or overwrite the params.

    ctx = attach_params(background(), {"id": "42"})
    retrieve_params(ctx)["id"]   # "42"
"""

from types import MappingProxyType
from typing import Mapping

from endpointkit.context import Context
from endpointkit.exceptions import NotFoundError


class _ParamsKey:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<endpointkit params key>"


_PARAMS_KEY = _ParamsKey()


def attach_params(ctx: Context, params: Mapping[str, str]) -> Context:
    """Return a context derived from `ctx` that carries a frozen copy of `params`."""
    return ctx.with_value(_PARAMS_KEY, MappingProxyType(dict(params)))


def retrieve_params(ctx: Context) -> Mapping[str, str]:
    """
    Return the params attached to `ctx`.

    Raises:
        NotFoundError: `ctx` was not derived through `attach_params`
    """
    params = ctx.value(_PARAMS_KEY)
    if params is None:
        raise NotFoundError("no params in context")
    return params
