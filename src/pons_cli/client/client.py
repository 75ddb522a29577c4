"""Synchronous HTTP client for the PONS dictionary API.

This module provides :class:`PonsClient`, a thin wrapper around
:class:`httpx.Client` exposing the two endpoints the CLI needs:

- ``GET {base}/dictionary?q=<word>&l=<dict>`` -- :meth:`PonsClient.fetch_translation`
- ``GET {base}/dictionaries?language=<lang>`` -- :meth:`PonsClient.fetch_dictionaries`

Both return the raw response bytes; deserialisation and caching happen in
:mod:`pons_cli.pipeline`. The client layers on:

- **Auth injection** -- the configured ``api_key`` is sent as the
  ``X-Secret`` header on translation requests.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).
- **Error mapping** -- transport failures and unexpected statuses become
  :class:`~pons_cli.exceptions.NetworkError` (or
  :class:`~pons_cli.exceptions.AuthError` for 401/403).
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from pons_cli.exceptions import AuthError, NetworkError
from pons_cli.models import AppConfig
from pons_cli.output import get_output

SECRET_HEADER = "X-Secret"


class PonsClient:
    """Blocking client for the PONS API.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Supplies ``base_url``, ``api_key``, ``timeout`` and
            ``max_retries``.
        transport: Optional :class:`httpx.BaseTransport`, mainly for tests
            (:class:`httpx.MockTransport`).

    Example::

        with PonsClient(config) as client:
            body = client.fetch_translation("Haus", "dede")
    """

    def __init__(
        self,
        config: AppConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> PonsClient:
        base_url = self._config.base_url
        if not base_url.endswith("/"):
            base_url += "/"
        self._client = httpx.Client(
            base_url=base_url,
            timeout=self._config.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Endpoints
    # ------------------------------------------------------------------ #

    def fetch_translation(self, word: str, dictionary: str) -> Optional[bytes]:
        """Fetch the translations of *word* in *dictionary*.

        Returns:
            The raw JSON body on HTTP 200, or ``None`` on HTTP 204 (the API's
            way of saying nothing was found).

        Raises:
            AuthError: On 401 / 403.
            NetworkError: On any other status, or a transport failure after
                all retries.
        """
        response = self._get(
            "dictionary",
            params={"q": word, "l": dictionary},
            headers={SECRET_HEADER: self._config.api_key},
        )
        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        self._raise_for_status(response)
        return response.content

    def fetch_dictionaries(self, language: str = "en") -> bytes:
        """Fetch the list of available dictionaries, labelled in *language*.

        Raises:
            NetworkError: On any status other than 200, or a transport
                failure after all retries.
        """
        response = self._get("dictionaries", params={"language": language})
        self._raise_for_status(response)
        return response.content

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _get(
        self,
        path: str,
        params: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """GET *path* with exponential-backoff retry on 5xx and network errors."""
        assert self._client is not None, "Client not initialised -- use as context manager"

        max_retries = self._config.max_retries
        output = get_output()
        merged_headers = {"Accept": "application/json", **(headers or {})}

        for attempt in range(max_retries + 1):
            try:
                output.debug(f"GET {path} {params}")
                response = self._client.get(path, params=params, headers=merged_headers)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise NetworkError(
                    f"could not reach {self._config.base_url}: {exc}"
                ) from exc
            except (httpx.TransportError, httpx.InvalidURL) as exc:
                # Protocol and URL errors do not improve on retry.
                raise NetworkError(
                    f"request to {self._config.base_url} failed: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue
            return response

        raise NetworkError("request failed after all retries")  # pragma: no cover

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Raise a typed exception unless the response is HTTP 200."""
        status = response.status_code
        if status == httpx.codes.OK:
            return
        if status in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise AuthError(
                f"bad status code: {status} (check your api_key with .set api_key <key>)",
                status_code=status,
            )
        raise NetworkError(f"bad status code: {status}", status_code=status)
