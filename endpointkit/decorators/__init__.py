"""
endpointkit — Endpoint Decorators
=================================

Cross-cutting behaviour applied per endpoint, composed with EndpointConfig.

Chain (order matters!):
    EndpointConfig([logger, timeout, limit_up])

    Request  → [logger] → [timeout] → [limit_up] → endpoint
    Response ← [logger] ← [timeout] ← [limit_up] ← endpoint

    - logger first: the logged duration covers the whole stack
    - timeout next: the deadline starts before any body is read
    - limit_up last: runs closest to the endpoint that reads the body
"""

from endpointkit.decorators.chain import Endpoint, EndpointConfig, EndpointDecorator
from endpointkit.decorators.limit import limit_body, limit_up
from endpointkit.decorators.logging import logger
from endpointkit.decorators.timeout import timeout, timeout_after

__all__ = [
    "Endpoint",
    "EndpointConfig",
    "EndpointDecorator",
    "limit_body",
    "limit_up",
    "logger",
    "timeout",
    "timeout_after",
]
