"""HTTP request builder and executor.

:class:`Request` is configured by *options* -- small functions produced by
the ``with_*`` constructors in :mod:`reqkit.client.options` -- and executed
against :mod:`httpx` with linear-backoff retries.

Example::

    from reqkit.client import new_request, with_header, with_retry

    with new_request("GET", "https://api.example.com/users",
                     with_header("Accept", "application/json"),
                     with_retry(3)) as req:
        data = req.execute()
        status = req.get_response().status_code
"""

from reqkit.client.encoding import UploadFile
from reqkit.client.options import (
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
from reqkit.client.request import BACKOFF_STEP, Option, Request, new_request

__all__ = [
    "BACKOFF_STEP",
    "Option",
    "Request",
    "UploadFile",
    "new_request",
    "with_form_body",
    "with_header",
    "with_json_body",
    "with_logger",
    "with_multipart_body",
    "with_query",
    "with_retry",
    "with_sleep",
    "with_timeout",
    "with_transport",
]
