"""End-to-end handshake through the real callback listener.

Only the Pocket API is mocked.  The listener binds a real loopback port,
the browser redirect is played from a separate thread with ``requests``
and the credential file lives under ``tmp_path``.

Coverage:
* Grant, approval and exchange yield a non-empty token that is persisted.
* The exchange runs on the listener's serving thread.
* The port is released once the run finishes.
"""

from __future__ import annotations

import socket
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from pocket_unread.core.models import AppConfig, CredentialRecord
from pocket_unread.core.unread_service import UnreadCountService
from pocket_unread.exceptions import RemoteError
from pocket_unread.infra.callback_listener import SUCCESS_MESSAGE, CallbackListener
from pocket_unread.infra.credential_store import JsonCredentialStore


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


def _loopback_listener(port: int) -> CallbackListener:
    return CallbackListener(port, host="127.0.0.1")


class _Browser:
    """Follows the redirect to the listener from a background thread."""

    def __init__(self, port: int) -> None:
        self._port = port
        self._thread: threading.Thread | None = None
        self.responses: list[requests.Response] = []

    def approve(self, _authorize_url: str) -> None:
        self._thread = threading.Thread(target=self._redirect, daemon=True)
        self._thread.start()

    def _redirect(self) -> None:
        with requests.Session() as session:
            session.trust_env = False
            self.responses.append(
                session.get(f"http://127.0.0.1:{self._port}/", timeout=5),
            )

    def join(self) -> None:
        assert self._thread is not None
        self._thread.join(timeout=5)


def _api(exchange_threads: list[str]) -> MagicMock:
    api = MagicMock()
    api.request_grant.return_value = "grant-code"
    api.authorize_url.return_value = "https://getpocket.com/auth/authorize?request_token=grant-code"

    def exchange(_consumer_key: str, _code: str) -> str:
        exchange_threads.append(threading.current_thread().name)
        return "new-token"

    api.exchange_grant.side_effect = exchange
    api.count_unread.return_value = 3
    return api


# ---------------------------------------------------------------------------
# Handshake
# ---------------------------------------------------------------------------

class TestHandshakeThroughListener:
    def test_token_obtained_and_persisted(self, credentials_path: Path) -> None:
        port = _free_port()
        exchange_threads: list[str] = []
        api = _api(exchange_threads)
        browser = _Browser(port)
        store = JsonCredentialStore(credentials_path)

        report = UnreadCountService(
            api, store, _loopback_listener, on_authorize_url=browser.approve,
        ).run(AppConfig(port=port, consumer_key="ck", config_path=credentials_path))
        browser.join()

        assert report.count == 3
        assert report.handshake_performed is True
        assert store.load() == CredentialRecord(consumer_key="ck", access_token="new-token")
        api.request_grant.assert_called_once_with("ck", f"http://localhost:{port}/")
        api.exchange_grant.assert_called_once_with("ck", "grant-code")
        api.count_unread.assert_called_once_with("ck", "new-token")

        assert exchange_threads == ["pocket-unread-callback"]
        assert browser.responses[0].status_code == 200
        assert SUCCESS_MESSAGE in browser.responses[0].text

    def test_port_released_after_run(self, credentials_path: Path) -> None:
        port = _free_port()
        browser = _Browser(port)

        UnreadCountService(
            _api([]),
            JsonCredentialStore(credentials_path),
            _loopback_listener,
            on_authorize_url=browser.approve,
        ).run(AppConfig(port=port, consumer_key="ck", config_path=credentials_path))
        browser.join()

        _loopback_listener(port).close()

    def test_rejected_exchange_ends_run(self, credentials_path: Path) -> None:
        port = _free_port()
        api = _api([])
        api.exchange_grant.side_effect = RemoteError(403, "User rejected code.")
        browser = _Browser(port)
        store = JsonCredentialStore(credentials_path)

        with pytest.raises(RemoteError, match="User rejected code."):
            UnreadCountService(
                api, store, _loopback_listener, on_authorize_url=browser.approve,
            ).run(AppConfig(port=port, consumer_key="ck", config_path=credentials_path))
        browser.join()

        assert browser.responses[0].status_code == 200
        assert not credentials_path.exists()
        _loopback_listener(port).close()
