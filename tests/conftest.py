"""Shared pytest fixtures and configuration for the pocket-unread test suite.

Guidelines
----------
* No internet access in any test.
* ``requests`` must be mocked at the infra boundary.
* The callback listener only ever binds the loopback interface.
* Credential files live under ``tmp_path``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pocket_unread.core.models import AppConfig


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "credentials.json"


@pytest.fixture
def app_config(credentials_path: Path) -> AppConfig:
    return AppConfig(
        port=5000,
        consumer_key="1234-abcd",
        config_path=credentials_path,
    )
