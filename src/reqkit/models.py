"""Pydantic models shared across reqkit.

:class:`Method` names the HTTP methods a request may use, and
:class:`RequestConfig` holds the request defaults persisted in the user's
config directory (see :mod:`reqkit.config`).
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field


class Method(str, enum.Enum):
    """HTTP methods supported by :class:`~reqkit.client.request.Request`."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class RequestConfig(BaseModel):
    """Default request settings layered under request-specific options."""

    timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-attempt timeout in seconds, None for no timeout"
    )
    retry: int = Field(default=0, ge=0, description="Retries after the first failed attempt")
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
