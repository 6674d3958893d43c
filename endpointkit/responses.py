"""
endpointkit — Envelope Responses
================================

What:  The four envelope shapes endpoints answer with, plus a dispatcher that
       picks the right one for an exception.

    result_response  → 200 {"success": true,  "result": ...}
    error_response   → 500 {"success": false, "error": ...}   (logged)
    size_response    → 417 {"success": false, "error": ...}
    no_access        → 401 {"success": false, "error": "No Access"}
"""

import logging
from typing import Any

from endpointkit.exceptions import AccessError, SizeError
from endpointkit.schemas.result import JSONResult
from endpointkit.writer import ResponseWriter

logger = logging.getLogger(__name__)

NO_ACCESS_MESSAGE = "No Access"


def result_response(w: ResponseWriter, result: Any) -> None:
    JSONResult(success=True, status_code=200, result=result).write(w)


def error_response(w: ResponseWriter, err: BaseException) -> None:
    """Log `err` and answer 500 with its message."""
    logger.error("%s", err, exc_info=err)
    JSONResult(success=False, status_code=500, error=str(err)).write(w)


def size_response(w: ResponseWriter, err: BaseException) -> None:
    # 417 Expectation Failed is the status clients of this API expect for
    # oversized payloads.
    JSONResult(success=False, status_code=417, error=str(err)).write(w)


def no_access(w: ResponseWriter) -> None:
    JSONResult(success=False, status_code=401, error=NO_ACCESS_MESSAGE).write(w)


def write_error(w: ResponseWriter, err: BaseException) -> None:
    """
    Answer `err` with the envelope matching its kind.

    SizeError → 417, AccessError → 401, everything else → 500 (logged).
    """
    if isinstance(err, SizeError):
        size_response(w, err)
    elif isinstance(err, AccessError):
        no_access(w)
    else:
        error_response(w, err)
