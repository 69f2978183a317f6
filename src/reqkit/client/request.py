"""The request draft and its executor.

:class:`Request` accumulates configuration from an ordered list of
*options* (see :mod:`reqkit.client.options`) and executes itself against
an :class:`httpx.Client`, retrying failed attempts with linear backoff:

- **Attempt** -- build the wire request, send it, require status 200,
  read the whole body, all within the configured timeout.
- **Retry** -- after a failed attempt, log one error through the
  configured logger, sleep ``0.2 s * retry_number`` (200 ms, 400 ms,
  600 ms, ...) and attempt again, until ``retry`` retries are spent.

Build errors (unsupported method, malformed URL) are raised on the first
attempt and never retried. The most recent response is kept on
:attr:`Request.response` even when its status code failed the attempt.

A :class:`Request` is mutated by options and by execution, so it must not
be shared between threads without external locking.

Example::

    from reqkit import new_request, with_json_body, with_retry

    req = new_request("POST", "https://api.example.com/items",
                      with_json_body({"name": "x"}), with_retry(2))
    body = req.execute()
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Union

import httpx

from reqkit.exceptions import (
    AttemptError,
    BodyReadError,
    ConnectionError_,
    Not200Error,
    RequestBuildError,
)
from reqkit.log import Logger, default_logger
from reqkit.models import Method

BACKOFF_STEP = 0.2
"""Seconds added to the backoff delay for each retry."""

Option = Callable[["Request"], None]
"""A configuration function applied to a :class:`Request` in order."""


class Request:
    """A configurable HTTP request with retry-on-failure.

    Args:
        method: One of ``GET``, ``POST``, ``PUT``, ``DELETE`` (case-insensitive).
            Checked when the request is executed, not here.
        url: Absolute ``http`` or ``https`` URL. Checked on execution.
        *options: Options applied in order; later options override earlier ones.

    Attributes:
        method: The HTTP method as an upper-case string.
        url: Target URL as given.
        body: Encoded request body, or ``None``.
        headers: Header mapping; one value per key, last write wins.
        query: Query parameters appended to the URL's own query string.
        retry: Number of retries after the first failed attempt.
        timeout: Seconds one attempt may take end to end (send plus body
            read), or ``None`` for no limit.
        client: The :class:`httpx.Client` used as the transport.
        logger: Receives one error message per retry.
        sleep: Backoff sleep function, called with seconds.
        response: The most recent response received, or ``None``.
    """

    def __init__(self, method: Union[Method, str], url: str, *options: Option) -> None:
        self.method: str = method.value if isinstance(method, Method) else str(method).upper()
        self.url = url
        self.body: Optional[bytes] = None
        self.headers: dict[str, str] = {}
        self.query: dict[str, str] = {}
        self.retry = 0
        self.timeout: Optional[float] = None
        self.client = httpx.Client(timeout=None)
        self.logger: Logger = default_logger()
        self.sleep: Callable[[float], None] = time.sleep
        self.response: Optional[httpx.Response] = None
        self.add_options(*options)

    def __repr__(self) -> str:
        return f"Request({self.method} {self.url}, retry={self.retry})"

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Request:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""
        self.client.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def add_options(self, *options: Option) -> Request:
        """Apply more options to this request and return it for chaining."""
        for option in options:
            option(self)
        return self

    def get_response(self) -> Optional[httpx.Response]:
        """Return the response of the most recent attempt that got one."""
        return self.response

    def execute(self) -> bytes:
        """Send the request, retrying failed attempts with linear backoff.

        Returns:
            The complete response body.

        Raises:
            RequestBuildError: The method or URL is invalid. Not retried.
            Not200Error: The last attempt got a status code other than 200.
            ConnectionError_: The last attempt failed at the transport level.
            BodyReadError: The last attempt failed while reading the body.
        """
        retries = 0
        while True:
            try:
                return self._attempt()
            except AttemptError as exc:
                if retries == self.retry:
                    raise
                retries += 1
                self.logger.error(
                    f"request [{self.url}] failed ({exc}), retry {retries}/{self.retry}..."
                )
                self.sleep(BACKOFF_STEP * retries)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _build(self) -> httpx.Request:
        """Build the wire request from the current configuration."""
        try:
            method = Method(self.method)
        except ValueError:
            raise RequestBuildError(f"Unsupported HTTP method: {self.method!r}") from None

        try:
            url = httpx.URL(self.url)
        except httpx.InvalidURL as exc:
            raise RequestBuildError(f"Invalid URL {self.url!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise RequestBuildError(f"Invalid URL {self.url!r}: expected an absolute http(s) URL")

        # Existing query values are kept; duplicate keys are allowed.
        if self.query:
            params = url.params
            for key, value in self.query.items():
                params = params.add(key, value)
            url = url.copy_with(params=params)

        try:
            return httpx.Request(method.value, url, headers=self.headers, content=self.body)
        except (UnicodeEncodeError, ValueError) as exc:
            raise RequestBuildError(f"Invalid header for {self.url!r}: {exc}") from exc

    def _attempt(self) -> bytes:
        """Run one send-and-classify cycle within the attempt deadline."""
        wire_request = self._build()
        deadline = None if self.timeout is None else time.monotonic() + self.timeout

        try:
            response = self.client.send(wire_request, stream=True)
        except httpx.RequestError as exc:
            raise ConnectionError_(f"Request to {self.url} failed: {exc}") from exc
        self.response = response

        try:
            self._check_deadline(deadline)
            if response.status_code != httpx.codes.OK:
                raise Not200Error(response.status_code)
            chunks: list[bytes] = []
            try:
                for chunk in response.iter_bytes():
                    self._check_deadline(deadline)
                    chunks.append(chunk)
            except (httpx.HTTPError, httpx.StreamError) as exc:
                raise BodyReadError(f"Reading response from {self.url} failed: {exc}") from exc
            self._check_deadline(deadline)
            return b"".join(chunks)
        finally:
            response.close()

    def _check_deadline(self, deadline: Optional[float]) -> None:
        if deadline is not None and time.monotonic() > deadline:
            raise ConnectionError_(f"Request to {self.url} timed out after {self.timeout}s")


def new_request(method: Union[Method, str], url: str, *options: Option) -> Request:
    """Create a :class:`Request` and apply *options* in order."""
    return Request(method, url, *options)
