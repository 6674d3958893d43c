"""
endpointkit — JSON Result Envelope
==================================

What:  The single response shape every endpoint answers with.
How:   A pydantic model; `write()` encodes it with pydantic-core and flushes
       header, status and body to a `ResponseWriter` in one step.

Wire format:
    {"success": true,  "result": <payload>}
    {"success": false, "error": "<message>"}

    The HTTP status travels in the status line only; `status_code` is never
    serialized. Empty `error` and `None` `result` are omitted.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic_core import PydanticSerializationError, to_json

from endpointkit.exceptions import SerializationFault
from endpointkit.writer import ResponseWriter

JSON_CONTENT_TYPE = "application/json; charset=UTF-8"


class JSONResult(BaseModel):
    """
    Response envelope.

    Convention (not enforced): `success=True` carries no `error`,
    `success=False` carries no `result`.
    """

    success: bool = Field(description="Whether the request succeeded")
    status_code: int = Field(default=200, exclude=True, description="HTTP status, not serialized")
    error: Optional[str] = Field(default=None, description="Error message on failure")
    result: Optional[Any] = Field(default=None, description="Payload on success")

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.error:
            payload["error"] = self.error
        if self.result is not None:
            payload["result"] = self.result
        return payload

    def encode(self) -> bytes:
        """
        Encode the envelope as newline-terminated JSON.

        Raises:
            SerializationFault: the payload contains something JSON cannot express
        """
        try:
            return to_json(self.to_wire()) + b"\n"
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise SerializationFault(
                message=f"Failed to encode response: {exc}",
                context={"status_code": self.status_code},
            ) from exc

    def write(self, w: ResponseWriter) -> None:
        """
        Write the envelope to `w`.

        Encoding happens before anything touches the writer: on
        SerializationFault the writer is left exactly as it was.
        """
        body = self.encode()
        w.headers["Content-Type"] = JSON_CONTENT_TYPE
        w.write_header(self.status_code)
        w.write(body)
