"""HTTP client module for pons-cli.

Provides :class:`PonsClient`, a blocking client backed by
:class:`httpx.Client` with ``X-Secret`` auth injection, retry with
exponential backoff, and status-to-exception mapping.

Example::

    from pons_cli.client import PonsClient

    with PonsClient(config) as client:
        body = client.fetch_dictionaries()
"""

from pons_cli.client.client import PonsClient

__all__ = ["PonsClient"]
