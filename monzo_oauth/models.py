from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ClientConfig:
    client_id: str
    client_secret: str
    redirect_url: str | None = None


@dataclass
class SessionState:
    state_token: str | None = None
    code: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
