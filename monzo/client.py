from __future__ import annotations

import hmac
import os

import httpx

from monzo_oauth.models import ClientConfig, SessionState
from monzo_oauth.oauth2 import (
    StateMismatchError,
    TokenResponse,
    authorization_code_payload,
    build_authorization_url,
    generate_state_token,
    refresh_token_payload,
)

from .constants import (
    API_URL,
    AUTH_URL,
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    LOGGER,
    REQUEST_METHODS,
    TOKEN_PATH,
)
from .env import get_env_float, is_truthy
from .http import build_async_client


class MonzoClient:
    """Async client for the Monzo OAuth2 authorization-code flow and REST API.

    Every operation awaits at most one HTTP call. Token fields are shared
    instance state: concurrent ``authenticate``/``refresh_access`` calls on
    the same instance race, and whichever finishes last wins.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        api_url: str = API_URL,
        auth_url: str = AUTH_URL,
        timeout: float | None = None,
        debug: bool = False,
    ) -> None:
        self.config = ClientConfig(
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
        )
        self.session = SessionState()
        self._client = client
        self._api_url = api_url if api_url.endswith("/") else f"{api_url}/"
        self._auth_url = auth_url
        self._timeout = timeout
        self._debug = debug

    @classmethod
    def from_env(cls, *, client: httpx.AsyncClient | None = None) -> "MonzoClient":
        return cls(
            os.getenv("MONZO_CLIENT_ID", "").strip(),
            os.getenv("MONZO_CLIENT_SECRET", "").strip(),
            os.getenv("MONZO_REDIRECT_URL", "").strip() or None,
            client=client,
            api_url=os.getenv("MONZO_API_URL", API_URL),
            auth_url=os.getenv("MONZO_AUTH_URL", AUTH_URL),
            timeout=get_env_float("MONZO_API_TIMEOUT", 30.0),
            debug=is_truthy(os.getenv("MONZO_API_DEBUG", "0")),
        )

    @property
    def client_id(self) -> str:
        return self.config.client_id

    @client_id.setter
    def client_id(self, value: str) -> None:
        self.config.client_id = value

    @property
    def client_secret(self) -> str:
        return self.config.client_secret

    @client_secret.setter
    def client_secret(self, value: str) -> None:
        self.config.client_secret = value

    @property
    def redirect_url(self) -> str | None:
        return self.config.redirect_url

    @redirect_url.setter
    def redirect_url(self, value: str | None) -> None:
        self.config.redirect_url = value

    @property
    def access_token(self) -> str | None:
        return self.session.access_token

    @access_token.setter
    def access_token(self, value: str | None) -> None:
        self.session.access_token = value

    @property
    def refresh_token(self) -> str | None:
        return self.session.refresh_token

    @refresh_token.setter
    def refresh_token(self, value: str | None) -> None:
        self.session.refresh_token = value

    @property
    def code(self) -> str | None:
        return self.session.code

    @property
    def state_token(self) -> str | None:
        return self.session.state_token

    def authorization_url(self) -> str:
        """Return the URL the user must visit to grant access.

        Each call issues a new state token, so only the most recently returned
        URL can complete ``authenticate``.
        """
        self.session.state_token = generate_state_token()
        return build_authorization_url(
            self.config.client_id,
            self.config.redirect_url,
            self.session.state_token,
            auth_url=self._auth_url,
        )

    async def authenticate(self, code: str, state_token: str) -> TokenResponse:
        """Exchange the ``code`` and ``state`` from the redirect for tokens."""
        expected = self.session.state_token
        if (
            expected is None
            or not isinstance(state_token, str)
            or not hmac.compare_digest(state_token.encode("utf-8"), expected.encode("utf-8"))
        ):
            LOGGER.warning("Rejected authentication: state token mismatch")
            raise StateMismatchError()

        self.session.code = code
        payload = await self.request(
            "POST",
            TOKEN_PATH,
            authorization_code_payload(self.config, code),
            use_bearer=False,
        )
        return self._store_tokens(payload)

    async def refresh_access(self) -> TokenResponse:
        payload = await self.request(
            "POST",
            TOKEN_PATH,
            refresh_token_payload(self.config, self.session.refresh_token),
            use_bearer=False,
        )
        return self._store_tokens(payload)

    async def ping(self) -> dict:
        return await self.request("GET", "ping/whoami")

    async def list_accounts(self, options: dict | None = None) -> dict:
        return await self.request("GET", "accounts", options or {})

    async def request(
        self,
        method: str,
        path: str,
        data: dict | None = None,
        use_bearer: bool = True,
    ) -> dict:
        """Send one request to the API and return the decoded JSON body.

        GET requests carry ``data`` in the query string; POST requests send it
        form encoded. HTTP and transport errors are raised as httpx raises them.
        """
        method = method.upper()
        if method not in REQUEST_METHODS:
            raise ValueError(f"Unsupported request method: {method}")

        url = f"{self._api_url}{path.lstrip('/')}"
        headers = {
            "Content-Type": JSON_CONTENT_TYPE if method == "GET" else FORM_CONTENT_TYPE,
        }
        if use_bearer:
            headers["Authorization"] = f"Bearer {self.session.access_token}"

        kwargs: dict = {"headers": headers}
        if data:
            if method == "GET":
                kwargs["params"] = data
            else:
                kwargs["data"] = data

        own_client = self._client is None
        http_client = self._client or build_async_client(
            timeout=self._timeout, debug=self._debug
        )

        try:
            response = await http_client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        finally:
            if own_client:
                await http_client.aclose()

    def _store_tokens(self, payload: dict) -> TokenResponse:
        token = TokenResponse.from_payload(payload)
        if token.access_token:
            self.session.access_token = token.access_token
        if token.refresh_token:
            self.session.refresh_token = token.refresh_token
        return token
