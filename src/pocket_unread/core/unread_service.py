"""Core orchestration — OAuth handshake followed by the unread count.

This is the central service class consumed by the CLI layer.  Its
collaborators (Pocket API, credential store, callback listener factory)
are injected at construction time (dependency inversion), keeping the
core free of any external-system imports.

Flow
----
1. Validate the port, load the stored record and apply the CLI key.
2. ``HAVE_TOKEN``: reuse the stored access token.
   ``NEED_HANDSHAKE``: bind the listener, request a grant, show the
   authorization URL and block until the listener hands back a token.
3. Count the items and persist the record.

Guarantees
----------
* No ``print()`` — progress goes through the injected callables.
* Only :class:`~pocket_unread.exceptions.PocketUnreadError` subclasses
  escape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pocket_unread.core.models import AppConfig, HandshakeState, UnreadReport
from pocket_unread.core.protocols import (
    CallbackListener,
    CredentialStore,
    ListenerFactory,
    PocketAPI,
)
from pocket_unread.core.settings import resolve_credentials, validate_port
from pocket_unread.exceptions import NetworkError, PocketUnreadError, RemoteError

logger = logging.getLogger(__name__)

REJECTED_TOKEN_STATUSES: frozenset[int] = frozenset({401, 403})


def _ignore(_message: str) -> None:
    return None


class UnreadCountService:
    """Drive one run of the tool.

    Parameters
    ----------
    api:
        Any object satisfying the :class:`PocketAPI` protocol.
    store:
        Any object satisfying the :class:`CredentialStore` protocol.
    listener_factory:
        Callable returning a bound callback listener for a port.  Only
        called when a handshake is required.
    on_progress:
        Receives human-readable progress lines.
    on_authorize_url:
        Receives the URL the user must open to approve access.
    """

    def __init__(
        self,
        api: PocketAPI,
        store: CredentialStore,
        listener_factory: ListenerFactory,
        *,
        on_progress: Callable[[str], None] | None = None,
        on_authorize_url: Callable[[str], None] | None = None,
    ) -> None:
        self._api: PocketAPI = api
        self._store: CredentialStore = store
        self._listener_factory: ListenerFactory = listener_factory
        self._on_progress: Callable[[str], None] = on_progress or _ignore
        self._on_authorize_url: Callable[[str], None] = on_authorize_url or _ignore

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, config: AppConfig) -> UnreadReport:
        """Authenticate if needed, then count the saved items.

        Raises
        ------
        ConfigError
            If the port is invalid or no consumer key is available.
        StorageError, DecodeError
            If the credential file cannot be read.
        NetworkError, RemoteError
            If a call to Pocket fails.
        """
        validate_port(config.port)
        record = resolve_credentials(self._store.load(), config.consumer_key)

        state = HandshakeState.for_record(record)
        logger.debug("Handshake state: %s", state.value)

        if state is HandshakeState.NEED_HANDSHAKE:
            access_token = self.perform_handshake(record.consumer_key, config)
            record = record.with_access_token(access_token)
        else:
            self._on_progress("Using stored access token")

        try:
            count = self._api.count_unread(record.consumer_key, record.access_token)
        except RemoteError as exc:
            if (
                state is HandshakeState.HAVE_TOKEN
                and exc.status in REJECTED_TOKEN_STATUSES
                and exc.hint is None
            ):
                exc.hint = (
                    "The stored access token was rejected. "
                    f"Delete {config.config_path} to re-authorize."
                )
            raise
        finally:
            self._store.save(record)
            logger.debug("Credentials saved")

        return UnreadReport(
            count=count,
            handshake_performed=state is HandshakeState.NEED_HANDSHAKE,
        )

    def perform_handshake(self, consumer_key: str, config: AppConfig) -> str:
        """Run the three-legged handshake and return the new access token.

        The listener is bound before the authorization URL is shown and is
        always closed before this method returns.
        """
        redirect_uri = config.redirect_uri
        listener = self._listener_factory(config.port)
        try:
            self._on_progress("Getting code")
            code = self._api.request_grant(consumer_key, redirect_uri)

            def exchange() -> str:
                self._on_progress("Getting access token")
                return self._api.exchange_grant(consumer_key, code)

            listener.start(exchange)
            self._on_authorize_url(self._api.authorize_url(code, redirect_uri))
            return self._wait(listener)
        finally:
            listener.close()

    # ------------------------------------------------------------------
    # Listener delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    def _wait(listener: CallbackListener) -> str:
        """Wait on the listener and ensure only our exceptions escape."""
        try:
            return listener.wait()
        except PocketUnreadError:
            raise
        except Exception as exc:
            raise NetworkError(
                f"Unexpected error while waiting for authorization: {exc}",
            ) from exc
