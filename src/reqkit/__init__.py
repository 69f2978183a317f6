"""reqkit -- a configurable HTTP request builder with retry and backoff.

A request is assembled from composable *options* (headers, query
parameters, body encoding, timeout, retry count, logger), executed through
:mod:`httpx`, and retried with a linear 200 ms backoff when an attempt
fails::

    from reqkit import new_request, with_form_body, with_retry

    req = new_request("POST", "https://api.example.com/login",
                      with_form_body({"user": "ada", "pin": 1234}),
                      with_retry(2))
    body = req.execute()

Modules:
    client: Request builder, option constructors, body encoders.
    models: Pydantic models (HTTP methods, persisted request defaults).
    config: XDG-aware config file and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    log: Logger protocol and the default logging-backed logger.
    output: stdout/stderr formatting with Rich support.
    app: Typer CLI (``reqkit send``, ``reqkit config``).
"""

__version__ = "0.1.0"

from reqkit.client import (  # noqa: E402
    BACKOFF_STEP,
    Option,
    Request,
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
from reqkit.exceptions import (  # noqa: E402
    AttemptError,
    BodyReadError,
    ConnectionError_,
    Not200Error,
    ReqkitError,
    RequestBuildError,
)
from reqkit.models import Method  # noqa: E402

__all__ = [
    "__version__",
    "AttemptError",
    "BACKOFF_STEP",
    "BodyReadError",
    "ConnectionError_",
    "Method",
    "Not200Error",
    "Option",
    "ReqkitError",
    "Request",
    "RequestBuildError",
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
