"""Infrastructure: JSON credential file on the local filesystem.

This module is the only place that touches the credential file.  All
``OSError`` and ``json`` failures are mapped to
:class:`~pocket_unread.exceptions.StorageError` and
:class:`~pocket_unread.exceptions.DecodeError`.

Rules
-----
* Writes are atomic (temp file + :func:`os.replace`).
* The file is readable and writable by its owner only.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any

from pocket_unread.core.models import CredentialRecord
from pocket_unread.exceptions import DecodeError, StorageError

logger = logging.getLogger(__name__)

APP_DIR_NAME: str = "pocket-unread"
CREDENTIALS_FILE_NAME: str = "credentials.json"
FILE_MODE: int = 0o600


# ---------------------------------------------------------------------------
# Default location
# ---------------------------------------------------------------------------

def get_user_config_dir() -> Path:
    """Per-user configuration directory for the application."""
    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def default_credentials_path() -> Path:
    return get_user_config_dir() / CREDENTIALS_FILE_NAME


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class JsonCredentialStore:
    """Concrete :class:`~pocket_unread.core.protocols.CredentialStore`.

    Usage::

        store = JsonCredentialStore(default_credentials_path())
        record = store.load()
        store.save(record.with_access_token("..."))
    """

    def __init__(self, path: Path) -> None:
        self._path: Path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> CredentialRecord:
        """Read the record, returning an empty one when the file is absent.

        The parent directory is created if needed.

        Raises
        ------
        StorageError
            When the directory cannot be created or the file cannot be read.
        DecodeError
            When the file is not a JSON object.
        """
        self._ensure_parent()

        if not self._path.exists():
            logger.debug("No credential file at %s", self._path)
            return CredentialRecord()

        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(
                f"Cannot read credential file {self._path}: {exc}",
            ) from exc

        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                f"Credential file {self._path} is not valid JSON: {exc}",
                hint="Fix or delete the file and authenticate again.",
            ) from exc

        return self._parse(data)

    def save(self, record: CredentialRecord) -> None:
        """Atomically replace the file with *record*.

        Raises
        ------
        StorageError
            When the file cannot be written.
        """
        self._ensure_parent()
        payload = json.dumps(
            {
                "consumer_key": record.consumer_key,
                "access_token": record.access_token,
            },
            indent=2,
        )

        fd, tmp_name = self._mkstemp()
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.chmod(tmp_name, FILE_MODE)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(
                f"Cannot write credential file {self._path}: {exc}",
            ) from exc

        logger.debug("Credential file written to %s", self._path)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_parent(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Cannot create config directory {self._path.parent}: {exc}",
                hint="Choose another location with --config.",
            ) from exc

    def _mkstemp(self) -> tuple[int, str]:
        try:
            return tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
        except OSError as exc:
            raise StorageError(
                f"Cannot write credential file {self._path}: {exc}",
            ) from exc

    def _parse(self, data: Any) -> CredentialRecord:
        if not isinstance(data, dict):
            raise DecodeError(
                f"Credential file {self._path} must contain a JSON object.",
            )
        consumer_key = data.get("consumer_key") or ""
        access_token = data.get("access_token") or ""
        if not isinstance(consumer_key, str) or not isinstance(access_token, str):
            raise DecodeError(
                f"Credential file {self._path} has non-string fields.",
            )
        return CredentialRecord(
            consumer_key=consumer_key,
            access_token=access_token,
        )
