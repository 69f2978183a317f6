"""Request body encoders for JSON, form-urlencoded, and multipart bodies.

Each encoder returns the complete body as ``bytes`` so that a retried
request resends exactly what the first attempt sent.

The JSON and multipart encoders are lenient: a value that cannot be
serialised produces an empty body, and a file stream that fails to read
produces an empty file part. Neither raises.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, BinaryIO, Mapping, Optional

from urllib3.filepost import encode_multipart_formdata

JSON_CONTENT_TYPE = "application/json;charset=UTF-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"
FILE_PART_CONTENT_TYPE = "application/octet-stream"


@dataclass
class UploadFile:
    """One file part of a multipart body.

    Attributes:
        field: Form field name of the part.
        file_name: File name reported in the part's ``Content-Disposition``.
        file: Readable binary stream. It is owned by the caller and read
            once, when the multipart option is created.
    """

    field: str
    file_name: str
    file: BinaryIO


def encode_json(value: Any) -> bytes:
    """Serialise *value* to compact UTF-8 JSON.

    Returns ``b""`` when *value* is not JSON-serialisable, including
    NaN and infinite floats, which JSON cannot represent.
    """
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError):
        return b""
    return text.encode("utf-8")


def convert_string(value: Any) -> str:
    """Convert a scalar form value to its string representation.

    * ``str`` is passed through.
    * ``int`` is formatted in decimal.
    * ``float`` uses the shortest decimal that round-trips, in fixed
      notation (``1e16`` becomes ``"10000000000000000"``, ``2.0`` becomes
      ``"2"``).
    * ``Decimal`` is formatted in fixed notation.
    * ``bool`` and every other type give ``""``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        return format(Decimal(repr(value)).normalize(), "f")
    if isinstance(value, Decimal):
        return format(value, "f")
    return ""


def encode_form(data: Mapping[str, Any]) -> str:
    """Join *data* as ``key=value`` pairs separated by ``&``.

    Values go through :func:`convert_string`. Keys and values are written
    as-is, without percent-escaping.
    """
    return "&".join(f"{key}={convert_string(value)}" for key, value in data.items())


def encode_multipart(
    file: Optional[UploadFile] = None,
    fields: Optional[Mapping[str, str]] = None,
) -> tuple[bytes, str]:
    """Build a ``multipart/form-data`` body.

    The file part (when given) comes first, followed by one part per plain
    field. The file stream is read to the end here.

    Returns:
        A ``(body, content_type)`` tuple. The content type carries the
        generated boundary.
    """
    parts: list[tuple[str, Any]] = []

    if file is not None:
        try:
            content = file.file.read()
        except (OSError, ValueError):
            content = b""
        if isinstance(content, str):
            content = content.encode("utf-8")
        parts.append((file.field, (file.file_name, content or b"", FILE_PART_CONTENT_TYPE)))

    for key, value in (fields or {}).items():
        parts.append((key, value))

    return encode_multipart_formdata(parts)
