"""Domain models for pocket-unread.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  A handshake never mutates a record; it
produces a new one through :meth:`CredentialRecord.with_access_token`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from pathlib import Path


# ---------------------------------------------------------------------------
# Persisted credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CredentialRecord:
    """The small record kept in the credential file."""

    consumer_key: str = ""
    """Application identifier issued by Pocket."""

    access_token: str = ""
    """Long-lived user token.  Empty until a handshake completes."""

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)

    def with_access_token(self, access_token: str) -> CredentialRecord:
        """Return a copy of this record holding *access_token*."""
        return replace(self, access_token=access_token)

    def with_consumer_key(self, consumer_key: str) -> CredentialRecord:
        """Return a copy of this record holding *consumer_key*."""
        return replace(self, consumer_key=consumer_key)


# ---------------------------------------------------------------------------
# Runtime configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings gathered once at startup and passed to the orchestrator."""

    port: int
    """Local port for the OAuth callback listener."""

    consumer_key: str | None
    """Consumer key given on the command line, if any."""

    config_path: Path
    """Location of the credential file."""

    open_browser: bool = False
    """Open the authorization URL in the default browser."""

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.port}/"


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

class HandshakeState(enum.Enum):
    """Whether a fresh OAuth handshake is required."""

    NEED_HANDSHAKE = "need_handshake"
    HAVE_TOKEN = "have_token"

    @classmethod
    def for_record(cls, record: CredentialRecord) -> HandshakeState:
        if record.has_access_token:
            return cls.HAVE_TOKEN
        return cls.NEED_HANDSHAKE


@dataclass(frozen=True, slots=True)
class UnreadReport:
    """Outcome of a single run."""

    count: int
    """Number of items in the user's list."""

    handshake_performed: bool
    """``True`` when a new access token was obtained during this run."""
