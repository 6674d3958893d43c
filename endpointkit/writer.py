"""
endpointkit — Response Writer
=============================

What:  The output sink endpoints write into.
How:   Buffers headers, status and body in memory. Nothing reaches the
       transport until the server turns the writer into a Starlette
       `Response` after the endpoint chain returns, so a response that
       fails half-way can still be replaced by the fault handler.
"""

import logging
from typing import Optional

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

logger = logging.getLogger(__name__)


class ResponseWriter:
    """
    Buffered response: headers, a status code set at most once, and a body.

    Usage:
        w = ResponseWriter()
        w.headers["Content-Type"] = "text/plain"
        w.write_header(201)
        w.write(b"created")
        response = w.to_response()
    """

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self.status_code: Optional[int] = None
        self._body = bytearray()

    @property
    def committed(self) -> bool:
        """True once a status code has been written."""
        return self.status_code is not None

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def write_header(self, status_code: int) -> None:
        """Set the status code. Only the first call has an effect."""
        if self.committed:
            logger.warning(
                "superfluous write_header(%d); status already %d",
                status_code,
                self.status_code,
            )
            return
        self.status_code = status_code

    def write(self, data: bytes) -> int:
        """Append `data` to the body, committing status 200 if none was set."""
        if not self.committed:
            self.write_header(200)
        self._body.extend(data)
        return len(data)

    def to_response(self) -> Response:
        response = Response(content=self.body, status_code=self.status_code or 200)
        # Raw pairs keep repeated headers such as Vary or Set-Cookie.
        response.raw_headers.extend(self.headers.raw)
        return response
