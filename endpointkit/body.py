"""
endpointkit — Request Body Decoder
==================================

What:  Reads a bounded amount of request body and validates it as JSON into
       a target type.
How:   Pulls chunks from the ASGI body stream until READLIMIT bytes have been
       collected (extra bytes are dropped, the stream is not read further),
       closes the stream, then hands the bytes to pydantic.

    class Note(BaseModel):
        title: str

    note = await decode_body(request, Note)
    tags = await decode_body(request, list[str])

Limits:
    READLIMIT (1 MiB) applies regardless of the declared Content-Length.
    A longer body is truncated at the byte boundary, which normally surfaces
    as a DecodeError because the JSON is cut off.
"""

from functools import lru_cache
from typing import Any, AsyncIterator, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import ClientDisconnect, Request

from endpointkit.exceptions import BodyReadError, DecodeError

MB = 1 << 20
READLIMIT = MB
BUFFERMAX = 5 * MB

T = TypeVar("T")


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


async def _read_at_most(stream: AsyncIterator[bytes], limit: int) -> bytes:
    buf = bytearray()
    async for chunk in stream:
        buf.extend(chunk[: limit - len(buf)])
        if len(buf) >= limit:
            break
    return bytes(buf)


async def _close(stream: AsyncIterator[bytes]) -> None:
    try:
        await stream.aclose()  # type: ignore[attr-defined]
    except (ClientDisconnect, OSError, RuntimeError) as exc:
        raise BodyReadError(
            message=f"failed to close request body: {exc}",
            context={"error": repr(exc)},
        ) from exc


async def read_body(request: Request, limit: int = READLIMIT) -> bytes:
    """
    Read at most `limit` bytes of the request body and close the stream.

    Raises:
        BodyReadError: the stream failed while reading or closing
        SizeError: the stream is capped by `limit_up` and went over the cap
    """
    stream = request.stream()
    try:
        return await _read_at_most(stream, limit)
    except (ClientDisconnect, OSError) as exc:
        raise BodyReadError(
            message=f"failed to read request body: {exc!r}",
            context={"error": repr(exc)},
        ) from exc
    finally:
        await _close(stream)


async def decode_body(request: Request, target: Union[Type[T], Any] = Any) -> T:
    """
    Decode the JSON request body into `target`.

    Args:
        request: Incoming request
        target:  A pydantic model class, or any type pydantic's TypeAdapter
                 accepts (dict, list[int], a TypedDict, ...). Defaults to Any,
                 which returns plain JSON values.

    Raises:
        BodyReadError: reading or closing the body failed
        DecodeError:   the bytes are not valid JSON for `target`
    """
    body = await read_body(request, READLIMIT)
    try:
        if isinstance(target, type) and issubclass(target, BaseModel):
            return target.model_validate_json(body)  # type: ignore[return-value]
        return _adapter(target).validate_json(body)
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        message = errors[0]["msg"] if errors else "invalid JSON body"
        raise DecodeError(message=message, errors=errors) from exc
