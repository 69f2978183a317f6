"""Tests for the option constructors."""

from __future__ import annotations

import io
from datetime import timedelta
from urllib.parse import parse_qs

import httpx
import pytest

from reqkit.client import (
    UploadFile,
    new_request,
    with_form_body,
    with_header,
    with_json_body,
    with_logger,
    with_multipart_body,
    with_query,
    with_retry,
    with_sleep,
    with_timeout,
    with_transport,
)
from reqkit.client.encoding import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE
from reqkit.exceptions import Not200Error, RequestBuildError
from reqkit.log import StdLogger


URL = "http://api.example.com/upload"


class _FailingStream(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("disk went away")


# ---------------------------------------------------------------------------
# Simple setters
# ---------------------------------------------------------------------------


class TestSetters:
    def test_with_logger(self, recording_logger) -> None:
        req = new_request("GET", URL, with_logger(recording_logger))
        assert req.logger is recording_logger

    def test_with_query_replaces_previous_mapping(self) -> None:
        req = new_request("GET", URL, with_query({"a": "1", "b": "2"}), with_query({"c": "3"}))
        assert req.query == {"c": "3"}

    def test_with_query_copies_mapping(self) -> None:
        query = {"a": "1"}
        req = new_request("GET", URL, with_query(query))
        query["b"] = "2"
        assert req.query == {"a": "1"}

    def test_with_timeout_seconds(self) -> None:
        req = new_request("GET", URL, with_timeout(2.5))
        assert req.client.timeout == httpx.Timeout(2.5)
        assert req.timeout == 2.5

    def test_with_timeout_timedelta(self) -> None:
        req = new_request("GET", URL, with_timeout(timedelta(milliseconds=1500)))
        assert req.client.timeout == httpx.Timeout(1.5)
        assert req.timeout == 1.5

    def test_with_timeout_none_clears(self) -> None:
        req = new_request("GET", URL, with_timeout(3), with_timeout(None))
        assert req.client.timeout == httpx.Timeout(None)
        assert req.timeout is None

    def test_with_retry(self) -> None:
        assert new_request("GET", URL, with_retry(7)).retry == 7

    def test_with_retry_rejects_negative(self) -> None:
        with pytest.raises(RequestBuildError, match=">= 0"):
            with_retry(-1)

    def test_with_header_last_wins(self) -> None:
        req = new_request("GET", URL, with_header("X", "1"), with_header("X", "2"))
        assert req.headers == {"X": "2"}

    def test_with_sleep(self, sleeps: list[float]) -> None:
        req = new_request("GET", URL, with_sleep(sleeps.append))
        req.sleep(0.4)
        assert sleeps == [0.4]

    def test_with_transport_keeps_timeout(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200))
        req = new_request("GET", URL, with_timeout(4), with_transport(transport))
        assert req.client.timeout == httpx.Timeout(4)
        assert req.execute() == b""


# ---------------------------------------------------------------------------
# Body options
# ---------------------------------------------------------------------------


class TestJsonBody:
    def test_sets_body_and_content_type(self) -> None:
        req = new_request("POST", URL, with_json_body({"name": "ada", "tags": [1, 2]}))
        assert req.body == b'{"name":"ada","tags":[1,2]}'
        assert req.headers["Content-Type"] == JSON_CONTENT_TYPE

    def test_unserialisable_value_gives_empty_body(self) -> None:
        req = new_request("POST", URL, with_json_body({"when": object()}))
        assert req.body == b""
        assert req.headers["Content-Type"] == JSON_CONTENT_TYPE


class TestFormBody:
    def test_decodes_to_string_pairs(self) -> None:
        req = new_request("POST", URL, with_form_body({"a": 1, "b": "x"}))
        assert parse_qs(req.body.decode()) == {"a": ["1"], "b": ["x"]}
        assert req.headers["Content-Type"] == FORM_CONTENT_TYPE

    def test_on_the_wire(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        new_request(
            "POST", URL, with_form_body({"n": 2.5, "s": "y"}),
            with_transport(httpx.MockTransport(handler)),
        ).execute()

        assert dict(pair.split("=") for pair in seen[0].content.decode().split("&")) == {
            "n": "2.5",
            "s": "y",
        }
        assert seen[0].headers["content-type"] == FORM_CONTENT_TYPE


class TestMultipartBody:
    def test_file_and_fields(self) -> None:
        upload = UploadFile(field="doc", file_name="notes.txt", file=io.BytesIO(b"file-bytes"))
        req = new_request("POST", URL, with_multipart_body(upload, {"kind": "text"}))

        content_type = req.headers["Content-Type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        boundary = content_type.split("boundary=", 1)[1]
        assert req.body.startswith(f"--{boundary}\r\n".encode())
        assert req.body.endswith(f"--{boundary}--\r\n".encode())
        assert b'name="doc"; filename="notes.txt"' in req.body
        assert b"Content-Type: application/octet-stream" in req.body
        assert b"file-bytes" in req.body
        assert b'name="kind"' in req.body
        assert b"\r\n\r\ntext\r\n" in req.body

    def test_fields_only(self) -> None:
        req = new_request("POST", URL, with_multipart_body(fields={"a": "1"}))
        assert req.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert b'name="a"' in req.body
        assert b"filename=" not in req.body

    def test_file_read_once_at_construction(self) -> None:
        stream = io.BytesIO(b"payload")
        option = with_multipart_body(UploadFile("f", "p.bin", stream))
        assert stream.tell() == len(b"payload")

        first = new_request("POST", URL, option)
        second = new_request("POST", URL, option)
        assert first.body == second.body
        assert b"payload" in first.body

    def test_failing_stream_gives_empty_part(self) -> None:
        upload = UploadFile(field="f", file_name="broken.bin", file=_FailingStream())
        req = new_request("POST", URL, with_multipart_body(upload, {"x": "1"}))
        assert b'filename="broken.bin"' in req.body
        assert b'name="x"' in req.body

    def test_retry_resends_buffered_body(self, sleeps: list[float]) -> None:
        bodies: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(request.content)
            return httpx.Response(500 if len(bodies) == 1 else 200)

        upload = UploadFile(field="f", file_name="a.txt", file=io.BytesIO(b"abc"))
        new_request(
            "POST",
            URL,
            with_multipart_body(upload),
            with_retry(1),
            with_sleep(sleeps.append),
            with_transport(httpx.MockTransport(handler)),
        ).execute()

        assert len(bodies) == 2
        assert bodies[0] == bodies[1]
        assert b"abc" in bodies[1]


class TestBodyOverride:
    def test_last_body_option_wins(self) -> None:
        req = new_request(
            "POST", URL, with_json_body({"a": 1}), with_form_body({"b": "2"})
        )
        assert req.body == b"b=2"
        assert req.headers["Content-Type"] == FORM_CONTENT_TYPE

    def test_header_option_after_body_overrides_content_type(self) -> None:
        req = new_request(
            "POST", URL, with_json_body([1]), with_header("Content-Type", "text/plain")
        )
        assert req.headers["Content-Type"] == "text/plain"
        assert req.body == b"[1]"

    def test_layering_defaults_then_overrides(self) -> None:
        req = new_request("POST", URL, with_header("User-Agent", "default"), with_retry(1))
        req.add_options(with_header("User-Agent", "custom"), with_json_body({}))
        assert req.headers == {"User-Agent": "custom", "Content-Type": JSON_CONTENT_TYPE}
        assert req.retry == 1


# ---------------------------------------------------------------------------
# Default logger
# ---------------------------------------------------------------------------


class TestStdLogger:
    def test_joins_arguments(self, caplog: pytest.LogCaptureFixture) -> None:
        import logging

        logger = StdLogger(logging.getLogger("reqkit.test"))
        with caplog.at_level(logging.ERROR, logger="reqkit.test"):
            logger.error("retry", 2, "of", 3, "100%")
        assert caplog.records[-1].getMessage() == "retry 2 of 3 100%"
        assert caplog.records[-1].levelno == logging.ERROR

    def test_default_logger_receives_retry_messages(
        self, caplog: pytest.LogCaptureFixture, sleeps: list[float]
    ) -> None:
        import logging

        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        req = new_request(
            "GET", URL, with_retry(1), with_sleep(sleeps.append), with_transport(transport)
        )
        with caplog.at_level(logging.ERROR, logger="reqkit"):
            with pytest.raises(Not200Error):
                req.execute()
        assert any(URL in r.getMessage() for r in caplog.records)
