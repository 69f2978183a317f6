"""Logger capability used by the request executor.

The executor only ever records error-level messages (one per retry), so the
capability is a single method. Anything with a compatible ``error`` method
satisfies :class:`Logger`, including :class:`~reqkit.output.OutputManager`
and the :class:`StdLogger` adapter around the standard :mod:`logging`
module.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Logger(Protocol):
    """Records an error-level message built from *args*."""

    def error(self, *args: Any) -> None: ...


class StdLogger:
    """Adapts a :class:`logging.Logger` to the :class:`Logger` protocol.

    The arguments are joined with single spaces, so values that contain
    ``%`` are never treated as format strings.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def error(self, *args: Any) -> None:
        self._logger.error("%s", " ".join(str(a) for a in args))


_default_logger = StdLogger(logging.getLogger("reqkit"))


def default_logger() -> StdLogger:
    """Return the process-wide logger handed to every new request."""
    return _default_logger
