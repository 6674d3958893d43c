"""
endpointkit — Middleware Package
================================

Transport-level wrappers applied once around the whole ASGI app, as opposed
to the per-endpoint decorators in `endpointkit.decorators`.

    Request → [CORS gate] → Server (router → endpoint decorators → endpoint)
"""
