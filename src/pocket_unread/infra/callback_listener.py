"""Infrastructure: one-shot local HTTP endpoint for the OAuth redirect.

After the user approves access, Pocket redirects the browser to
``http://localhost:<port>/``.  The first request on ``/`` triggers the
token exchange, answers with a small HTML page and hands the result to
the waiting orchestrator through a :class:`concurrent.futures.Future`.

Design
------
* The socket is bound in the constructor, before the authorization URL
  is shown to the user.
* Serving happens on a daemon thread; :meth:`CallbackListener.wait`
  blocks the caller without a timeout.
* Exchange failures are logged and travel through the same future, so
  the caller sees them; the browser still gets a normal page.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlsplit

from pocket_unread.exceptions import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_HOST: str = "localhost"

_PAGE_TEMPLATE: str = (
    "<!DOCTYPE html>\n"
    "<html><head><meta charset=\"utf-8\"><title>pocket-unread</title></head>\n"
    "<body><p>{message}</p></body></html>\n"
)

SUCCESS_MESSAGE: str = "Authorization complete. You may close this window."
FAILURE_MESSAGE: str = (
    "Authorization could not be completed. "
    "See the terminal for details. You may close this window."
)
NOT_FOUND_MESSAGE: str = "Not found."


# ---------------------------------------------------------------------------
# HTTP plumbing
# ---------------------------------------------------------------------------

class _CallbackServer(HTTPServer):
    """``HTTPServer`` carrying the exchange callable and the one-shot result."""

    def __init__(self, address: tuple[str, int]) -> None:
        super().__init__(address, _CallbackHandler)
        self.exchange: Callable[[], str] | None = None
        self.result: Future[str] = Future()


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackServer

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        logger.debug("callback: " + format, *args)

    def do_GET(self) -> None:
        if urlsplit(self.path).path != "/":
            self._send_page(404, NOT_FOUND_MESSAGE)
            return

        result = self.server.result
        if result.done() or self.server.exchange is None:
            # Only the first redirect is meaningful.
            self._send_page(200, SUCCESS_MESSAGE)
            return

        try:
            access_token = self.server.exchange()
        except Exception as exc:  # noqa: BLE001
            logger.error("Token exchange failed: %s", exc)
            self._send_page(200, FAILURE_MESSAGE)
            result.set_exception(exc)
            return

        self._send_page(200, SUCCESS_MESSAGE)
        result.set_result(access_token)

    def _send_page(self, status: int, message: str) -> None:
        body = _PAGE_TEMPLATE.format(message=message).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)


# ---------------------------------------------------------------------------
# Public listener
# ---------------------------------------------------------------------------

class CallbackListener:
    """Concrete :class:`~pocket_unread.core.protocols.CallbackListener`.

    Usage::

        with CallbackListener(5000) as listener:
            listener.start(lambda: client.exchange_grant(key, code))
            token = listener.wait()
    """

    def __init__(self, port: int, *, host: str = DEFAULT_HOST) -> None:
        try:
            self._server: _CallbackServer = _CallbackServer((host, port))
        except OSError as exc:
            raise NetworkError(
                f"Cannot listen on {host}:{port}: {exc}",
                hint="Choose a different port with --port.",
            ) from exc
        self._thread: threading.Thread | None = None
        logger.debug("Callback listener bound to %s:%d", host, self.port)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> CallbackListener:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    @property
    def port(self) -> int:
        """The bound port (useful when constructed with port ``0``)."""
        return int(self._server.server_address[1])

    def start(self, exchange: Callable[[], str]) -> None:
        """Begin serving on a background thread."""
        if self._thread is not None:
            raise RuntimeError("Callback listener already started.")
        self._server.exchange = exchange
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="pocket-unread-callback",
            daemon=True,
        )
        self._thread.start()

    def wait(self) -> str:
        """Block until the callback has been handled; return the token."""
        return self._server.result.result()

    def close(self) -> None:
        """Stop serving, release the port and join the serving thread."""
        if self._thread is not None:
            self._server.shutdown()
            self._thread.join()
            self._thread = None
        self._server.server_close()
        logger.debug("Callback listener closed")
