"""The ``reqkit send`` command -- build, execute, and print one request.

Flags map one-to-one onto request options: ``--header`` onto
:func:`~reqkit.client.options.with_header`, ``--json-body`` onto
:func:`~reqkit.client.options.with_json_body`, and so on. Resolved config
defaults (see :func:`~reqkit.config.resolve_config`) are applied first so
that the flags override them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.markup import escape

from reqkit.client import (
    Option,
    UploadFile,
    new_request,
    with_form_body,
    with_header,
    with_json_body,
    with_logger,
    with_multipart_body,
    with_query,
)
from reqkit.config import config_options, resolve_config
from reqkit.exceptions import InvalidUsageError
from reqkit.output import get_output


def _split_pair(raw: str, sep: str, flag: str) -> tuple[str, str]:
    """Split ``key<sep>value``, raising :class:`InvalidUsageError` if *sep* is missing."""
    key, found, value = raw.partition(sep)
    key = key.strip()
    if not found or not key:
        raise InvalidUsageError(f"Invalid {flag} value {raw!r}: expected 'key{sep}value'")
    return key, value.strip() if sep == ":" else value


def _body_options(
    json_body: Optional[str],
    form: list[str],
    fields: list[str],
    file: Optional[str],
) -> list[Option]:
    """Translate the body flags into at most one body option."""
    kinds = sum([json_body is not None, bool(form), bool(fields) or file is not None])
    if kinds > 1:
        raise InvalidUsageError("Use only one of --json-body, --form, or --field/--file")

    if json_body is not None:
        try:
            return [with_json_body(json.loads(json_body))]
        except json.JSONDecodeError as exc:
            raise InvalidUsageError(f"--json-body is not valid JSON: {exc}") from exc

    if form:
        return [with_form_body(dict(_split_pair(item, "=", "--form") for item in form))]

    if fields or file is not None:
        plain = dict(_split_pair(item, "=", "--field") for item in fields)
        upload: Optional[UploadFile] = None
        if file is not None:
            field_name, path_str = _split_pair(file, "=", "--file")
            path = Path(path_str).expanduser()
            if not path.is_file():
                raise InvalidUsageError(f"--file path does not exist: {path}")
            with path.open("rb") as fh:
                upload = UploadFile(field=field_name, file_name=path.name, file=fh)
                return [with_multipart_body(upload, plain)]
        return [with_multipart_body(None, plain)]

    return []


def _show_response_head(response: Optional[httpx.Response]) -> None:
    """Print the status line and response headers to stderr."""
    if response is None:
        return
    output = get_output()
    output.info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
    for key, value in response.headers.items():
        output.info(escape(f"{key}: {value}"))


def send_command(
    method: str = typer.Argument(help="HTTP method: GET, POST, PUT or DELETE."),
    url: str = typer.Argument(help="Absolute http(s) URL."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Header as 'Name: value'. Repeatable."
    ),
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-Q", help="Query parameter as 'key=value'. Repeatable."
    ),
    json_body: Optional[str] = typer.Option(
        None, "--json-body", help="JSON document sent as the request body."
    ),
    form: Optional[list[str]] = typer.Option(
        None, "--form", help="Form-urlencoded field as 'key=value'. Repeatable."
    ),
    field: Optional[list[str]] = typer.Option(
        None, "--field", help="Multipart text field as 'key=value'. Repeatable."
    ),
    file: Optional[str] = typer.Option(
        None, "--file", help="Multipart file part as 'field=path'."
    ),
    retry: Optional[int] = typer.Option(
        None, "--retry", "-r", min=0, help="Retries after a failed attempt."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Per-attempt timeout in seconds."
    ),
    include: bool = typer.Option(
        False, "--include", "-i", help="Print status line and response headers to stderr."
    ),
) -> None:
    """Send an HTTP request and print the response body.

    Failed attempts (network errors, any status other than 200, broken
    bodies) are retried with a 200 ms, 400 ms, 600 ms, ... backoff.

    Example::

        reqkit send GET https://httpbin.org/get -Q page=2 --retry 3
        reqkit send POST https://httpbin.org/post --json-body '{"a": 1}'
        reqkit send PUT https://httpbin.org/put --file upload=report.pdf --field kind=pdf
    """
    output = get_output()
    config = resolve_config(cli_timeout=timeout, cli_retry=retry)

    options: list[Option] = [*config_options(config), with_logger(output)]
    options.extend(with_header(*_split_pair(h, ":", "--header")) for h in header or [])
    if query:
        options.append(with_query(dict(_split_pair(q, "=", "--query") for q in query)))
    options.extend(_body_options(json_body, form or [], field or [], file))

    with new_request(method, url, *options) as req:
        output.debug(f"{req.method} {req.url} (retry={req.retry})")
        try:
            body = req.execute()
        finally:
            if include:
                _show_response_head(req.get_response())
        response = req.get_response()
        content_type = response.headers.get("content-type", "") if response is not None else ""
        output.format_response(body, content_type)
