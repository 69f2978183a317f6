"""Option constructors for :class:`~reqkit.client.request.Request`.

Every ``with_*`` function returns an *option*: a function that mutates a
request in place. Options run in the order they are given, so later
options win where they overlap (two headers with the same key, two body
options, two timeouts, ...).

The body options (:func:`with_json_body`, :func:`with_form_body`,
:func:`with_multipart_body`) are meant to be used one per request.
Applying several is allowed; the last one sets both the body and the
``Content-Type`` header.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

import httpx

from reqkit.client.encoding import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    UploadFile,
    encode_form,
    encode_json,
    encode_multipart,
)
from reqkit.exceptions import RequestBuildError

if TYPE_CHECKING:
    from reqkit.client.request import Option, Request
    from reqkit.log import Logger


def with_logger(logger: Logger) -> Option:
    """Send retry messages to *logger* instead of the default logger."""

    def apply(request: Request) -> None:
        request.logger = logger

    return apply


def with_query(query: Mapping[str, str]) -> Option:
    """Replace the query-parameter mapping (earlier mappings are discarded)."""

    def apply(request: Request) -> None:
        request.query = dict(query)

    return apply


def with_timeout(timeout: Union[float, timedelta, None]) -> Option:
    """Set the per-attempt timeout.

    The limit covers the whole attempt, from sending the request to reading
    the last body byte. An attempt that runs past it fails with
    :class:`~reqkit.exceptions.ConnectionError_` and is retried like any
    other transport failure. The same value also bounds each individual
    socket operation of the transport.

    Args:
        timeout: Seconds, a :class:`~datetime.timedelta`, or ``None`` to
            wait indefinitely.
    """
    if isinstance(timeout, timedelta):
        timeout = timeout.total_seconds()

    def apply(request: Request) -> None:
        request.timeout = timeout
        request.client.timeout = httpx.Timeout(timeout)

    return apply


def with_retry(retry: int) -> Option:
    """Set how many times a failed attempt is retried (default ``0``).

    Raises:
        RequestBuildError: If *retry* is negative.
    """
    if retry < 0:
        raise RequestBuildError(f"Retry count must be >= 0, got {retry}")

    def apply(request: Request) -> None:
        request.retry = retry

    return apply


def with_header(key: str, value: str) -> Option:
    """Set a single header, replacing any earlier value for *key*."""

    def apply(request: Request) -> None:
        request.headers[key] = value

    return apply


def with_json_body(body: Any) -> Option:
    """Send *body* encoded as JSON.

    A value that cannot be serialised results in an empty body; no error
    is raised.
    """

    def apply(request: Request) -> None:
        request.body = encode_json(body)
        request.headers["Content-Type"] = JSON_CONTENT_TYPE

    return apply


def with_form_body(body: Mapping[str, Any]) -> Option:
    """Send *body* as ``application/x-www-form-urlencoded`` pairs.

    See :func:`~reqkit.client.encoding.convert_string` for how values are
    stringified.
    """

    def apply(request: Request) -> None:
        request.body = encode_form(body).encode("utf-8")
        request.headers["Content-Type"] = FORM_CONTENT_TYPE

    return apply


def with_multipart_body(
    file: Optional[UploadFile] = None,
    fields: Optional[Mapping[str, str]] = None,
) -> Option:
    """Send a ``multipart/form-data`` body with an optional file and plain fields.

    The body is built right away: the file stream is read here, once, and
    the resulting bytes are reused by every attempt. A stream that fails
    to read leaves the file part empty instead of raising.
    """
    content, content_type = encode_multipart(file, fields)

    def apply(request: Request) -> None:
        request.body = content
        request.headers["Content-Type"] = content_type

    return apply


def with_transport(transport: httpx.BaseTransport) -> Option:
    """Send requests through *transport*, keeping the configured timeout.

    Mostly useful with :class:`httpx.MockTransport` to fake the network.
    """

    def apply(request: Request) -> None:
        timeout = request.client.timeout
        request.client.close()
        request.client = httpx.Client(transport=transport, timeout=timeout)

    return apply


def with_sleep(sleep: Callable[[float], None]) -> Option:
    """Replace the function used to sleep between retries."""

    def apply(request: Request) -> None:
        request.sleep = sleep

    return apply
