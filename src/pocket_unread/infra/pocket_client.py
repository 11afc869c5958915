"""``requests`` backed implementation of :class:`~pocket_unread.core.protocols.PocketAPI`.

This module is the **only** place in the codebase that imports
``requests``.  All transport exceptions are caught here and re-raised as
typed :class:`~pocket_unread.exceptions.PocketUnreadError` subclasses —
nothing raw escapes the infrastructure boundary.

Every call is a single attempt; there is no retry.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import requests

from pocket_unread.exceptions import DecodeError, NetworkError, RemoteError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL: str = "https://getpocket.com/v3"
AUTHORIZE_PAGE_URL: str = "https://getpocket.com/auth/authorize"

DEFAULT_TIMEOUT: float = 30.0
"""Seconds before a single request is abandoned."""

HEADERS: dict[str, str] = {
    "Content-Type": "application/json; charset=UTF8",
    "X-Accept": "application/json",
}

ERROR_HEADER: str = "X-Error"


class PocketClient:
    """Concrete :class:`PocketAPI` for the Pocket v3 endpoints.

    Usage::

        client = PocketClient()
        code = client.request_grant(consumer_key, "http://localhost:5000/")
        token = client.exchange_grant(consumer_key, code)
        count = client.count_unread(consumer_key, token)
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url: str = base_url.rstrip("/")
        self._session: requests.Session = session or requests.Session()
        self._timeout: float = timeout

    # ------------------------------------------------------------------
    # OAuth handshake
    # ------------------------------------------------------------------

    def request_grant(self, consumer_key: str, redirect_uri: str) -> str:
        """POST to ``oauth/request`` and return the grant ``code``."""
        data = self._post(
            "oauth/request",
            {"consumer_key": consumer_key, "redirect_uri": redirect_uri},
        )
        return self._require_str(data, "code")

    def exchange_grant(self, consumer_key: str, code: str) -> str:
        """POST to ``oauth/authorize`` and return the ``access_token``."""
        data = self._post(
            "oauth/authorize",
            {"consumer_key": consumer_key, "code": code},
        )
        return self._require_str(data, "access_token")

    @staticmethod
    def authorize_url(code: str, redirect_uri: str) -> str:
        """Return the page where the user approves the grant *code*."""
        query = urlencode({"request_token": code, "redirect_uri": redirect_uri})
        return f"{AUTHORIZE_PAGE_URL}?{query}"

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def count_unread(self, consumer_key: str, access_token: str) -> int:
        """POST to ``get`` and return the number of entries in ``list``."""
        data = self._post(
            "get",
            {"consumer_key": consumer_key, "access_token": access_token},
        )
        if "list" not in data:
            raise DecodeError("Response decode failed: missing 'list' field.")

        items = data["list"]
        # An account with no items is answered with an empty array.
        if isinstance(items, (dict, list)):
            return len(items)
        raise DecodeError(
            f"Response decode failed: 'list' is {type(items).__name__}, expected object.",
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _post(self, endpoint: str, payload: dict[str, str]) -> dict[str, Any]:
        """Send one JSON POST and return the decoded JSON object.

        Raises
        ------
        NetworkError
            On any transport-level failure.
        RemoteError
            When the status is not 200.
        DecodeError
            When the body is not a JSON object.
        """
        url = f"{self._base_url}/{endpoint}"
        logger.debug("POST %s", url)

        try:
            response = self._session.post(
                url,
                json=payload,
                headers=HEADERS,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(
                f"Request failed: {exc}",
                hint="Check your internet connection.",
            ) from exc

        if response.status_code != 200:
            service_error = response.headers.get(ERROR_HEADER, "")
            logger.debug(
                "POST %s returned %s (%s)", url, response.status_code, service_error,
            )
            raise RemoteError(response.status_code, service_error)

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise DecodeError(f"Response decode failed: {exc}") from exc

        if not isinstance(data, dict):
            raise DecodeError("Response decode failed: expected a JSON object.")
        return data

    @staticmethod
    def _require_str(data: dict[str, Any], field: str) -> str:
        value = data.get(field)
        if not isinstance(value, str) or not value:
            raise DecodeError(f"Response decode failed: missing '{field}' field.")
        return value
