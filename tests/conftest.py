import pytest

from monzo.client import MonzoClient

MONZO_ENV_KEYS = (
    "MONZO_CLIENT_ID",
    "MONZO_CLIENT_SECRET",
    "MONZO_REDIRECT_URL",
    "MONZO_API_URL",
    "MONZO_AUTH_URL",
    "MONZO_API_TIMEOUT",
    "MONZO_API_DEBUG",
    "MONZO_ACCESS_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_monzo_env(monkeypatch) -> None:
    for key in MONZO_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def monzo_env(monkeypatch) -> None:
    monkeypatch.setenv("MONZO_CLIENT_ID", "oauthclient_123")
    monkeypatch.setenv("MONZO_CLIENT_SECRET", "secret_456")
    monkeypatch.setenv("MONZO_REDIRECT_URL", "https://example.com/callback")


@pytest.fixture
def monzo_client() -> MonzoClient:
    return MonzoClient(
        "oauthclient_123",
        "secret_456",
        "https://example.com/callback",
    )
