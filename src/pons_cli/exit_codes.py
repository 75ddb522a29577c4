"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~pons_cli.exceptions.PonsError` subclass.
One-shot commands (``pons translate``, ``pons dicts``) exit with these
codes so shell wrappers can tell failures apart without parsing stderr.

Example::

    $ pons translate haus --dict dede
    $ echo $?
    2   # EXIT_INVALID_USAGE -- unknown dictionary key
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments, or no dictionary is selected."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the configured ``api_key``."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred or the API answered with an unexpected status."""

EXIT_DATA_ERROR = 7
"""A cached or fetched response could not be deserialized."""
