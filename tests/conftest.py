"""Shared test fixtures for clientgrant.

Provides reusable fixtures for isolated config environments, output state
and canonical token responses. These fixtures are automatically discovered
by pytest and available to all test modules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from clientgrant.models import ClientCredentials, Profile
from clientgrant.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test, the cached references go stale once the test finishes.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Grant fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials() -> ClientCredentials:
    return ClientCredentials(client_id="id1", client_secret="secret1")


@pytest.fixture
def rfc_token_body() -> dict[str, Any]:
    """The example token response of RFC 6749 section 5.1."""
    return {
        "access_token": "2YotnFZFEjr1zCsicMWpAA",
        "token_type": "example",
        "expires_in": 3600,
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, forces the XDG layout,
    and clears CLIENTGRANT_PROFILE.
    """
    monkeypatch.setattr("clientgrant.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("CLIENTGRANT_PROFILE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_profile() -> Profile:
    """A profile reading its credentials from CG_CLIENT_ID / CG_CLIENT_SECRET."""
    return Profile(
        name="billing",
        token_url="https://auth.example.com/token",
        scope="invoices:read",
        client_id_source="env:CG_CLIENT_ID",
        client_secret_source="env:CG_CLIENT_SECRET",
    )

