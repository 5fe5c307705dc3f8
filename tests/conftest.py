"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from gc_auth.config import ENV_MAPPING, ENV_PREFIX, FlowConfig
from gc_auth.logging_config import reset_logging

ENVIRONMENT = "mypurecloud.com"
CLIENT_ID = "test-client-id"
REDIRECT_URI = "https://localhost:8443/callback"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host GC_* variables out of configuration tests."""
    for suffix in ENV_MAPPING.values():
        monkeypatch.delenv(f"{ENV_PREFIX}{suffix}", raising=False)


@pytest.fixture(autouse=True)
def reset_logging_state() -> None:
    """Reset logging state before each test."""
    reset_logging()


@pytest.fixture
def pkce_config() -> FlowConfig:
    """Create a PKCE flow configuration for testing."""
    return FlowConfig(
        environment=ENVIRONMENT,
        client_id=CLIENT_ID,
        redirect_uri=REDIRECT_URI,
        use_pkce=True,
    )


@pytest.fixture
def implicit_config() -> FlowConfig:
    """Create an implicit grant flow configuration for testing."""
    return FlowConfig(
        environment=ENVIRONMENT,
        client_id=CLIENT_ID,
        redirect_uri=REDIRECT_URI,
        use_pkce=False,
    )


@pytest.fixture
def org_config() -> FlowConfig:
    """Create a PKCE flow configuration with org and provider routing."""
    return FlowConfig(
        environment=ENVIRONMENT,
        client_id=CLIENT_ID,
        redirect_uri=REDIRECT_URI,
        use_pkce=True,
        auth_org="my-org",
        auth_provider="okta",
    )
