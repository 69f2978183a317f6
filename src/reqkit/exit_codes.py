"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reqkit.exceptions.ReqkitError` subclass.
Shell wrappers can inspect the exit code of ``reqkit send`` to tell a
rejected status apart from a network failure without parsing stderr.

Example::

    $ reqkit send GET https://example.com/missing
    $ echo $?
    5   # EXIT_STATUS_ERROR -- the server answered with a non-200 status
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The request could not be built (bad arguments, method, or URL)."""

EXIT_STATUS_ERROR = 5
"""The server answered, but with a status code other than 200."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_BODY_READ_ERROR = 7
"""The response body could not be read to the end."""
