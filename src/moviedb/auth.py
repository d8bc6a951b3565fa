"""Authentication handshake: API key -> request token -> session id.

SessionManager owns nothing but the logic; the credentials live in an
AuthState owned by one client instance and are only updated here.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from moviedb.models import AuthenticationToken, HttpMethod, Params, SessionResponse
from moviedb.utils.debug import debug, info

TOKEN_ENDPOINT = "authentication/token/new"
SESSION_ENDPOINT = "authentication/session/new"

Send = Callable[[HttpMethod, str, Params], Awaitable[Any]]


class AuthenticationError(Exception):
    """Raised when a token or session payload cannot be used.

    The API reports bad keys and denied tokens in the response body, e.g.
    ``{"success": false, "status_code": 7, "status_message": "..."}``; that
    body is kept on ``payload``.
    """

    def __init__(self, step: str, payload: Any) -> None:  # noqa: ANN401
        """Initialize the error with the failing step and the decoded body."""
        message = payload.get("status_message") if isinstance(payload, dict) else None
        super().__init__(f"{step} failed: {message or payload!r}")
        self.step = step
        self.payload = payload


@dataclass
class AuthState:
    """Credential material remembered by one client instance."""

    token: Optional[AuthenticationToken] = None
    session_id: Optional[str] = None


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class SessionManager:
    """Obtain and cache request tokens, and exchange them for session ids."""

    def __init__(
        self,
        state: AuthState,
        send: Send,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the manager.

        Args:
            state: Per-client credential state, updated in place.
            send: Coroutine performing ``(method, template, params)`` through
                the client's normal request pipeline.
            now: Clock returning an aware datetime.
        """
        self.state = state
        self._send = send
        self._now = now
        self._refresh_lock = asyncio.Lock()

    async def request_token(self) -> AuthenticationToken:
        """Return a valid request token, fetching a new one when needed.

        Concurrent callers wait on a single refresh instead of each issuing
        their own.

        Raises:
            AuthenticationError: If the API does not return a usable token.
        """
        async with self._refresh_lock:
            token = self.state.token
            if token is not None and not token.is_expired(self._now()):
                debug("Reusing cached request token")
                return token
            payload = await self._send(HttpMethod.GET, TOKEN_ENDPOINT, None)
            try:
                token = AuthenticationToken.model_validate(payload)
            except ValidationError as exc:
                raise AuthenticationError("request token", payload) from exc
            if not token.success:
                raise AuthenticationError("request token", payload)
            self.state.token = token
            info(f"Request token refreshed, expires at {token.expires_at}")
            return token

    async def retrieve_session(self) -> str:
        """Exchange a fresh request token for a new session id.

        Every call performs a new exchange; the session id is not cached
        beyond being stored for use by later requests.

        Raises:
            AuthenticationError: If the API does not return a session id.
        """
        token = await self.request_token()
        payload = await self._send(
            HttpMethod.GET, SESSION_ENDPOINT, {"request_token": token.request_token}
        )
        try:
            session = SessionResponse.model_validate(payload)
        except ValidationError as exc:
            raise AuthenticationError("session", payload) from exc
        if not session.success:
            raise AuthenticationError("session", payload)
        self.state.session_id = session.session_id
        info("Session established")
        return session.session_id
