"""
endpointkit — Exception Hierarchy
=================================

What:  Application-specific exceptions for every failure a request can hit.
How:   Each exception carries a human-readable message and an optional context
       dict. The server's fault handler and `responses.write_error` map them
       onto JSON envelopes with the matching HTTP status code.
Who:   Raised by the body decoder, the parameter carrier, the decorators and
       the config layer; caught at the endpoint boundary.

Exception Hierarchy:
    EndpointKitError (base)
    ├── BodyReadError        → 500 (request body could not be read or closed)
    ├── DecodeError          → 500 (body is not valid JSON for the target shape)
    ├── NotFoundError        → 500 (no params attached to the context)
    ├── AccessError          → 401 (authorization denied)
    ├── SizeError            → 417 (payload exceeds the cap)
    ├── SerializationFault   → 500 (response encoding failed; unrecoverable
    │                              for the current response)
    └── ConfigurationError   → startup failure (missing environment keys)
"""

from typing import Any, Dict, List, Optional


class EndpointKitError(Exception):
    """
    Base exception for all endpointkit errors.

    Attributes:
        message:  Error description, returned as the envelope's `error` field
        context:  Additional debug info (logged, never serialized)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BodyReadError(EndpointKitError):
    """
    Raised when the request body stream fails while reading or closing.

    When:  Client disconnects mid-body, or the transport reports an I/O error.
    """

    def __init__(
        self,
        message: str = "Failed to read request body",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DecodeError(EndpointKitError):
    """
    Raised when the request body is not valid JSON or does not match the
    target shape.

    The pydantic validation errors, when available, are kept in
    `context["errors"]`.
    """

    def __init__(
        self,
        message: str = "Failed to decode request body",
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.errors = errors or []


class NotFoundError(EndpointKitError):
    """
    Raised when a lookup on the request context finds nothing.

    When:  `retrieve_params` is called on a context that was never passed
           through `attach_params`.
    """

    def __init__(
        self,
        message: str = "The requested value was not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AccessError(EndpointKitError):
    """
    Raised by endpoints that deny access.

    HTTP:  401, answered with the fixed `"No Access"` envelope.
    """

    def __init__(
        self,
        message: str = "No Access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SizeError(EndpointKitError):
    """
    Raised when a request payload exceeds the allowed size.

    Two sources:
        - `limit_up` rejecting a declared Content-Length above the cap
        - the capped body stream once more than `limit` bytes were received
    """

    def __init__(
        self,
        message: str = "Request body too large",
        limit: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if limit is not None:
            ctx["limit"] = limit
        super().__init__(message=message, context=ctx)
        self.limit = limit


class SerializationFault(EndpointKitError):
    """
    Raised when a response envelope cannot be encoded as JSON.

    This is the one error that cannot be turned into a meaningful response by
    the code that caused it. It terminates the current response only; the
    server's fault handler logs it at CRITICAL and answers with a plain 500
    envelope instead.
    """

    def __init__(
        self,
        message: str = "Failed to encode response",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(EndpointKitError):
    """
    Raised at startup when required environment keys are missing.

    Attributes:
        missing: Every key that had no value, in lookup order
    """

    def __init__(self, missing: List[str], context: Optional[Dict[str, Any]] = None):
        message = "No value for key: " + ", ".join(missing)
        ctx = context or {}
        ctx["missing"] = list(missing)
        super().__init__(message=message, context=ctx)
        self.missing = list(missing)
