"""Validation of the runtime configuration.

Pure functions — no I/O.  They run before any network activity so that
a bad port or a missing consumer key fails fast.
"""

from __future__ import annotations

from pocket_unread.core.models import CredentialRecord
from pocket_unread.exceptions import ConfigError

DEFAULT_PORT: int = 5000

MIN_PORT: int = 1024
"""Ports at or below this value are rejected (privileged range)."""

MAX_PORT: int = 65535

CONSUMER_KEY_HINT: str = (
    "Pass --consumer-key. Create one at https://getpocket.com/developer/apps/"
)


def validate_port(port: int) -> int:
    """Return *port* unchanged or raise :class:`ConfigError`."""
    if port <= MIN_PORT:
        raise ConfigError(
            f"Port number must be larger than {MIN_PORT}, got {port}.",
            hint="Use an unprivileged port, e.g. --port 5000",
        )
    if port > MAX_PORT:
        raise ConfigError(
            f"Port number must not exceed {MAX_PORT}, got {port}.",
        )
    return port


def resolve_credentials(
    stored: CredentialRecord,
    consumer_key: str | None,
) -> CredentialRecord:
    """Merge the command-line consumer key into the stored record.

    A non-empty *consumer_key* replaces the stored key; the stored access
    token is kept as is.

    Raises
    ------
    ConfigError
        If neither source provides a consumer key.
    """
    record = stored
    if consumer_key is not None and consumer_key.strip():
        record = stored.with_consumer_key(consumer_key.strip())

    if not record.consumer_key:
        raise ConfigError(
            "You must provide a consumer key.",
            hint=CONSUMER_KEY_HINT,
        )
    return record
