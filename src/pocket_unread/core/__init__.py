"""Core / service layer — pure business logic and orchestration.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed.
"""

from pocket_unread.core.models import AppConfig, CredentialRecord, HandshakeState, UnreadReport
from pocket_unread.core.protocols import CallbackListener, CredentialStore, PocketAPI
from pocket_unread.core.settings import resolve_credentials, validate_port
from pocket_unread.core.unread_service import UnreadCountService

__all__: list[str] = [
    "AppConfig",
    "CallbackListener",
    "CredentialRecord",
    "CredentialStore",
    "HandshakeState",
    "PocketAPI",
    "UnreadCountService",
    "UnreadReport",
    "resolve_credentials",
    "validate_port",
]
