"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Pocket API, the local
filesystem and the loopback HTTP server.  Every raw third-party
exception must be caught here and re-raised as a
:class:`~pocket_unread.exceptions.PocketUnreadError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from pocket_unread.infra.callback_listener import CallbackListener
from pocket_unread.infra.credential_store import (
    JsonCredentialStore,
    default_credentials_path,
    get_user_config_dir,
)
from pocket_unread.infra.pocket_client import PocketClient

__all__: list[str] = [
    "CallbackListener",
    "JsonCredentialStore",
    "PocketClient",
    "default_credentials_path",
    "get_user_config_dir",
]
