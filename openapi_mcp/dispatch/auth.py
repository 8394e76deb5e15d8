"""
Authentication State Machine.

When username/password are configured, every dispatched call carries an
access-token credential obtained from the wrapped API itself:

    NO_TOKEN ──login──▶ REFRESHING ──▶ VALID
    VALID (expiring) ──refresh──▶ REFRESHING ──▶ VALID

- Login: POST {base}/authentication, form body {clientId, username, password};
  response carries accessToken, sessionId, expiresIn (seconds), all required.
- Refresh: POST {base}/token with "MTAuth sessionId=<id>" in the auth header;
  response carries accessToken. expires_at is NOT advanced by a refresh,
  so once a token has entered the skew window every later call refreshes
  again (kept as the API's observed behavior).
- Calls carry "X-MT-Authorization: MTAuth accessToken=<token>".

Concurrency:
    There is one AuthState per server. Login/refresh is single-flight:
    the first caller that finds the token missing or expiring starts the
    exchange as a task; callers arriving while it runs await that same
    task. At most one exchange is outstanding, and fields are swapped in
    together, so no caller reads a half-updated token.

Usage:
    manager = TokenManager(
        AuthConfig(username="svc", password="secret", client_id="mcp"),
        base_url="https://api.example.com",
        http_client=client,
    )
    headers.update(await manager.auth_headers())
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from openapi_mcp.dispatch.http import send
from openapi_mcp.errors import UpstreamRequestError

logger = logging.getLogger(__name__)

DEFAULT_SKEW_SECONDS = 10.0


# =============================================================================
# Configuration & State
# =============================================================================


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Configuration for the login/refresh exchange."""

    username: str
    password: str = field(repr=False)
    client_id: str = ""

    # Endpoints (relative to the API base URL)
    login_path: str = "/authentication"
    refresh_path: str = "/token"

    # Wire conventions: "<scheme> accessToken=<token>" on calls and
    # "<scheme> sessionId=<id>" on refresh
    auth_header: str = "X-MT-Authorization"
    session_header: str = "X-MT-Authorization"
    auth_scheme: str = "MTAuth"

    skew_seconds: float = DEFAULT_SKEW_SECONDS

    def token_value(self, access_token: str) -> str:
        return f"{self.auth_scheme} accessToken={access_token}"

    def session_value(self, session_id: str) -> str:
        return f"{self.auth_scheme} sessionId={session_id}"


class AuthPhase(Enum):
    """Phase of the shared credential."""

    NO_TOKEN = "no_token"
    VALID = "valid"
    REFRESHING = "refreshing"


@dataclass(slots=True)
class AuthState:
    """
    Mutable per-process credential record.

    username/password never rotate; session_id, access_token and
    expires_at (epoch seconds) come from the remote API.
    """

    username: str
    password: str = field(repr=False)
    session_id: str | None = None
    access_token: str | None = field(default=None, repr=False)
    expires_at: float | None = None
    phase: AuthPhase = AuthPhase.NO_TOKEN

    def is_expiring(self, now: float, skew: float) -> bool:
        """True when expiry is within `skew` seconds or already passed."""
        if self.expires_at is None:
            return True
        return self.expires_at - now <= skew


# =============================================================================
# Token Manager
# =============================================================================


class TokenManager:
    """
    Owns the AuthState and serializes login/refresh.

    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        config: AuthConfig,
        *,
        base_url: str,
        http_client: httpx.AsyncClient,
        headers: dict[str, str] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the manager.

        Args:
            config: Credentials and wire conventions
            base_url: API base URL
            http_client: Client used for the exchanges
            headers: Static headers sent with every exchange
            clock: Returns current epoch seconds
        """
        self._config = config
        self._base_url = base_url.rstrip("/")
        self._client = http_client
        self._headers = dict(headers or {})
        self._clock = clock
        self._state = AuthState(username=config.username, password=config.password)
        self._inflight: asyncio.Future[str] | None = None

    @property
    def state(self) -> AuthState:
        """The shared credential record."""
        return self._state

    @property
    def config(self) -> AuthConfig:
        return self._config

    async def access_token(self) -> str:
        """
        Return a usable access token, logging in or refreshing if needed.

        Raises:
            UpstreamRequestError: If the login/refresh exchange fails
        """
        state = self._state
        if (
            self._inflight is None
            and state.phase is AuthPhase.VALID
            and state.access_token
            and not state.is_expiring(self._clock(), self._config.skew_seconds)
        ):
            return state.access_token

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._exchange())
        else:
            logger.debug("[token_manager] Joining in-flight token exchange")

        # One caller's cancellation must not cancel the shared exchange
        return await asyncio.shield(self._inflight)

    async def auth_headers(self) -> dict[str, str]:
        """Authorization header carrying the current access token."""
        token = await self.access_token()
        return {self._config.auth_header: self._config.token_value(token)}

    async def _exchange(self) -> str:
        state = self._state
        state.phase = AuthPhase.REFRESHING
        try:
            if state.access_token is None:
                await self._login()
            else:
                await self._refresh()
        except BaseException:
            state.phase = AuthPhase.VALID if state.access_token else AuthPhase.NO_TOKEN
            raise
        finally:
            self._inflight = None

        state.phase = AuthPhase.VALID
        return state.access_token

    async def _login(self) -> None:
        url = f"{self._base_url}{self._config.login_path}"
        logger.info(f"[token_manager] Logging in as {self._config.username}")

        response = await send(
            self._client,
            "POST",
            url,
            data={
                "clientId": self._config.client_id,
                "username": self._state.username,
                "password": self._state.password,
            },
            headers=self._headers or None,
        )
        payload = _token_payload(response, "login")

        raw_expires_in = payload.get("expiresIn")
        if raw_expires_in is None:
            raise UpstreamRequestError(
                "login response has no expiresIn",
                status_code=response.status_code,
                response_body=response.text,
            )
        try:
            expires_in = float(raw_expires_in)
        except (TypeError, ValueError) as e:
            raise UpstreamRequestError(
                f"login returned invalid expiresIn: {raw_expires_in!r}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        state = self._state
        state.access_token, state.session_id, state.expires_at = (
            payload["accessToken"],
            payload.get("sessionId"),
            self._clock() + expires_in,
        )
        logger.info(f"[token_manager] Logged in (expires in {expires_in:.0f}s)")

    async def _refresh(self) -> None:
        url = f"{self._base_url}{self._config.refresh_path}"
        logger.info("[token_manager] Refreshing access token")

        headers = {**self._headers}
        if self._state.session_id:
            headers[self._config.session_header] = self._config.session_value(
                self._state.session_id
            )

        response = await send(self._client, "POST", url, headers=headers)
        payload = _token_payload(response, "refresh")

        # A refresh does not advance expires_at
        self._state.access_token = payload["accessToken"]
        logger.info("[token_manager] Access token refreshed")


def _token_payload(response: httpx.Response, exchange: str) -> dict[str, Any]:
    """Parse an exchange response and require an accessToken."""
    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamRequestError(
            f"{exchange} returned a non-JSON body",
            status_code=response.status_code,
            response_body=response.text,
        ) from e

    if not isinstance(payload, dict) or not payload.get("accessToken"):
        raise UpstreamRequestError(
            f"{exchange} response has no accessToken",
            status_code=response.status_code,
            response_body=response.text,
        )
    return payload
