"""
endpointkit — Envelope Response Tests
=====================================

What:  Tests for JSONResult encoding and the four envelope helpers.

Test Strategy:
    ✅ Status code, content type and body shape of every helper
    ✅ Omitted fields (no `error` on success, no `result` on failure)
    ✅ error_response logs exactly once
    ✅ Unserializable payloads raise SerializationFault and leave the writer untouched
    ✅ write_error picks the envelope from the exception kind
"""

import json
import logging
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel

from endpointkit.exceptions import AccessError, DecodeError, SerializationFault, SizeError
from endpointkit.responses import (
    error_response,
    no_access,
    result_response,
    size_response,
    write_error,
)
from endpointkit.schemas.result import JSON_CONTENT_TYPE, JSONResult


def _body(writer):
    return json.loads(writer.body)


class TestResultResponse:

    def test_success_envelope(self, writer):
        result_response(writer, {"id": "42", "tags": ["a", "b"]})

        assert writer.status_code == 200
        assert writer.headers["content-type"] == JSON_CONTENT_TYPE
        assert _body(writer) == {"success": True, "result": {"id": "42", "tags": ["a", "b"]}}

    def test_no_error_field(self, writer):
        result_response(writer, 1)
        assert "error" not in _body(writer)

    def test_empty_list_result_is_kept(self, writer):
        result_response(writer, [])
        assert _body(writer) == {"success": True, "result": []}

    def test_none_result_is_omitted(self, writer):
        result_response(writer, None)
        assert _body(writer) == {"success": True}

    def test_pydantic_models_and_datetimes_are_encoded(self, writer):
        class Item(BaseModel):
            name: str
            created_at: datetime

        when = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        result_response(writer, [Item(name="x", created_at=when)])

        assert _body(writer)["result"] == [{"name": "x", "created_at": "2024-01-15T12:00:00Z"}]

    def test_body_is_newline_terminated(self, writer):
        result_response(writer, "ok")
        assert writer.body.endswith(b"\n")


class TestErrorResponses:

    def test_error_response(self, writer, caplog):
        with caplog.at_level(logging.ERROR, logger="endpointkit.responses"):
            error_response(writer, RuntimeError("database is gone"))

        assert writer.status_code == 500
        assert writer.headers["content-type"] == JSON_CONTENT_TYPE
        assert _body(writer) == {"success": False, "error": "database is gone"}
        records = [r for r in caplog.records if r.name == "endpointkit.responses"]
        assert len(records) == 1
        assert "database is gone" in records[0].getMessage()

    def test_size_response(self, writer):
        size_response(writer, SizeError("post is too big"))

        assert writer.status_code == 417
        assert _body(writer) == {"success": False, "error": "post is too big"}

    def test_no_access(self, writer):
        no_access(writer)

        assert writer.status_code == 401
        assert _body(writer) == {"success": False, "error": "No Access"}

    def test_status_code_is_not_serialized(self, writer):
        no_access(writer)
        assert "status_code" not in _body(writer)


class TestWriteError:

    @pytest.mark.parametrize(
        "exc, status",
        [
            (SizeError("too big"), 417),
            (AccessError(), 401),
            (DecodeError("bad json"), 500),
            (ValueError("boom"), 500),
        ],
    )
    def test_status_follows_exception_kind(self, writer, exc, status):
        write_error(writer, exc)
        assert writer.status_code == status
        assert _body(writer)["success"] is False


class TestSerializationFault:

    def test_unserializable_result_raises(self, writer):
        with pytest.raises(SerializationFault):
            result_response(writer, {"handle": object()})

    def test_writer_untouched_on_fault(self, writer):
        with pytest.raises(SerializationFault):
            JSONResult(success=True, result=object()).write(writer)

        assert not writer.committed
        assert writer.body == b""
        assert "content-type" not in writer.headers


class TestResponseWriter:

    def test_first_status_wins(self, writer):
        writer.write_header(201)
        writer.write_header(500)
        assert writer.status_code == 201

    def test_write_commits_200(self, writer):
        writer.write(b"hi")
        assert writer.status_code == 200
        assert writer.body == b"hi"

    def test_to_response_keeps_repeated_headers(self, writer):
        writer.headers.append("Vary", "Origin")
        writer.headers.append("Vary", "Accept")
        result_response(writer, 1)

        response = writer.to_response()

        assert response.status_code == 200
        assert response.headers.getlist("vary") == ["Origin", "Accept"]
        assert json.loads(response.body) == {"success": True, "result": 1}

    def test_to_response_carries_envelope_headers(self, writer):
        error_response(writer, RuntimeError("boom"))

        response = writer.to_response()

        assert response.status_code == 500
        assert response.headers.getlist("content-type") == [JSON_CONTENT_TYPE]
        assert response.headers["content-length"] == str(len(writer.body))

    def test_to_response_without_writes(self, writer):
        response = writer.to_response()

        assert response.status_code == 200
        assert response.body == b""
