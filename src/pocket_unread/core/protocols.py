"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from pocket_unread.core.models import CredentialRecord


class PocketAPI(Protocol):
    """Contract for the remote Pocket endpoints.

    Implementations must map all transport and decoding failures to
    :class:`~pocket_unread.exceptions.PocketUnreadError` subclasses.
    """

    def request_grant(self, consumer_key: str, redirect_uri: str) -> str:
        """Obtain a single-use grant code bound to *redirect_uri*.

        Raises
        ------
        RemoteError
            When Pocket answers with a non-200 status.
        NetworkError
            On transport failure.
        DecodeError
            When the response does not carry a ``code``.
        """
        ...  # pragma: no cover

    def exchange_grant(self, consumer_key: str, code: str) -> str:
        """Trade an approved grant *code* for a long-lived access token."""
        ...  # pragma: no cover

    def authorize_url(self, code: str, redirect_uri: str) -> str:
        """Return the page the user must visit to approve *code*."""
        ...  # pragma: no cover

    def count_unread(self, consumer_key: str, access_token: str) -> int:
        """Return the number of items in the user's list."""
        ...  # pragma: no cover


class CredentialStore(Protocol):
    """Contract for loading and persisting the :class:`CredentialRecord`."""

    def load(self) -> CredentialRecord:
        """Return the stored record, or an empty record when none exists.

        Raises
        ------
        StorageError
            When the file or its directory cannot be accessed.
        DecodeError
            When the file is not a JSON object.
        """
        ...  # pragma: no cover

    def save(self, record: CredentialRecord) -> None:
        """Atomically replace the stored record with *record*."""
        ...  # pragma: no cover


class CallbackListener(Protocol):
    """Contract for the one-shot local endpoint hit by the browser redirect.

    The listener is bound as soon as it is constructed.  The exchange
    callable passed to :meth:`start` runs on the listener's own thread;
    its result (or error) is handed back to :meth:`wait`.
    """

    def start(self, exchange: Callable[[], str]) -> None:
        """Begin serving; *exchange* is invoked on the first callback."""
        ...  # pragma: no cover

    def wait(self) -> str:
        """Block until the callback has been handled and return the token.

        Re-raises the exchange error when the exchange failed.
        """
        ...  # pragma: no cover

    def close(self) -> None:
        """Stop serving and release the port."""
        ...  # pragma: no cover


ListenerFactory = Callable[[int], CallbackListener]
"""Builds a bound :class:`CallbackListener` for a given port."""
