from __future__ import annotations

import secrets
import time
import urllib.parse
from dataclasses import dataclass, field

from monzo.constants import AUTH_URL

from .models import ClientConfig


class StateMismatchError(RuntimeError):
    def __init__(
        self, message: str = "The provided state token differs from the original one."
    ) -> None:
        super().__init__(message)


@dataclass
class TokenResponse:
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    expires_at: float | None = None
    token_type: str | None = None
    user_id: str | None = None
    client_id: str | None = None
    raw: dict = field(default_factory=dict)

    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return time.time() >= self.expires_at

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenResponse":
        if not isinstance(payload, dict):
            raise RuntimeError("Token response must be a JSON object.")

        expires_in = payload.get("expires_in")
        if not isinstance(expires_in, int):
            expires_in = None

        return cls(
            access_token=_optional_str(payload.get("access_token")),
            refresh_token=_optional_str(payload.get("refresh_token")),
            expires_in=expires_in,
            expires_at=None if expires_in is None else time.time() + expires_in,
            token_type=_optional_str(payload.get("token_type")),
            user_id=_optional_str(payload.get("user_id")),
            client_id=_optional_str(payload.get("client_id")),
            raw=payload,
        )


def _optional_str(value) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def generate_state_token() -> str:
    return secrets.token_urlsafe(24)


def build_authorization_url(
    client_id: str,
    redirect_uri: str | None,
    state: str,
    *,
    auth_url: str = AUTH_URL,
) -> str:
    query = {"client_id": client_id}
    if redirect_uri is not None:
        query["redirect_uri"] = redirect_uri
    query["response_type"] = "code"
    query["state"] = state
    return f"{auth_url}?{urllib.parse.urlencode(query)}"


def authorization_code_payload(config: ClientConfig, code: str) -> dict[str, str]:
    payload = {
        "grant_type": "authorization_code",
        "client_id": config.client_id,
        "client_secret": config.client_secret,
    }
    if config.redirect_url is not None:
        payload["redirect_uri"] = config.redirect_url
    payload["code"] = code
    return payload


def refresh_token_payload(config: ClientConfig, refresh_token: str | None) -> dict[str, str]:
    payload = {
        "grant_type": "refresh_token",
        "client_id": config.client_id,
        "client_secret": config.client_secret,
    }
    # No local check: without a refresh token the provider rejects the request.
    if refresh_token is not None:
        payload["refresh_token"] = refresh_token
    return payload
