"""Async client for The Movie Database (TMDB) v3 API.

MovieDb wires the request pipeline together:

    params -> build_request (normalize, merge auth, compile path)
           -> Throttle (rate-limited, FIFO start)
           -> httpx -> decoded JSON

Responses are returned as decoded JSON whatever the status code; the API
reports most failures in the body (``success``/``status_code`` fields), and
callers are expected to inspect it.

Usage:
    async with MovieDb(api_key="...") as client:
        movie = await client.movie_info(550)
        await client.retrieve_session()
        favorites = await client.account_favorite_movies()
"""

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from moviedb.auth import AuthState, SessionManager
from moviedb.endpoints import EndpointsMixin
from moviedb.models import AuthenticationToken, HttpMethod, Params
from moviedb.request import RequestDescriptor, build_request
from moviedb.settings import Settings
from moviedb.throttle import Throttle
from moviedb.utils.debug import debug, warn

DEFAULT_BASE_URL = "https://api.themoviedb.org/3/"
DEFAULT_REQUESTS_PER_SECOND = 50
DEFAULT_TIMEOUT = 10.0


class MovieDb(EndpointsMixin):
    """Client for the TMDB v3 API.

    Every API operation is available as an async method (see
    ``moviedb.endpoints``). Each accepts either a bare value, bound to the
    endpoint's single placeholder, or a parameter mapping, plus optional
    ``request_options`` passed through to ``httpx`` for that call.

    Attributes:
        base_url: API root, with trailing slash.
        throttle: Per-instance rate limiter.
        auth: Credential state (request token and session id).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: TMDB v3 API key, sent as ``api_key`` on every call.
            base_url: API root.
            requests_per_second: Throttle ceiling for this instance.
            timeout: Default httpx timeout in seconds.
            http_client: Optional pre-configured httpx client. It is used as-is
                and never closed by MovieDb.
        """
        self._api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.throttle = Throttle(requests_per_second)
        self.auth = AuthState()
        self.sessions = SessionManager(self.auth, self.request)
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MovieDb":
        """Build a client from environment / config-file settings.

        Raises:
            MissingAPIKeyError: If no API key is configured.
        """
        settings = settings or Settings()
        settings.require_keys()
        return cls(
            api_key=settings.api_key,  # type: ignore[arg-type]
            base_url=settings.base_url,
            requests_per_second=settings.requests_per_second,
            timeout=settings.timeout,
        )

    @property
    def session_id(self) -> Optional[str]:
        """Session id merged into every request, if one is set."""
        return self.auth.session_id

    @session_id.setter
    def session_id(self, value: Optional[str]) -> None:
        self.auth.session_id = value

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the underlying httpx client if MovieDb created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MovieDb":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def request_token(self) -> AuthenticationToken:
        """Return a valid request token, refreshing it once expired."""
        return await self.sessions.request_token()

    async def retrieve_session(self) -> str:
        """Exchange a request token for a session id and start using it."""
        return await self.sessions.retrieve_session()

    def build(
        self,
        method: HttpMethod,
        template: str,
        params: Params = None,
        request_options: Optional[Mapping[str, Any]] = None,
    ) -> RequestDescriptor:
        """Assemble the request for a call without sending it."""
        return build_request(
            method,
            template,
            params,
            api_key=self._api_key,
            base_url=self.base_url,
            session_id=self.auth.session_id,
            options=request_options,
        )

    async def request(
        self,
        method: HttpMethod,
        template: str,
        params: Params = None,
        request_options: Optional[Mapping[str, Any]] = None,
    ) -> Any:  # noqa: ANN401
        """Perform one API call through the throttle.

        Args:
            method: HTTP verb.
            template: Endpoint template, e.g. ``"movie/:id"``.
            params: Bare value or parameter mapping.
            request_options: Extra ``httpx`` request keywords for this call.

        Returns:
            The decoded JSON body.

        Raises:
            httpx.TransportError: On network failures (not retried).
            json.JSONDecodeError: If the body is not JSON.
        """
        descriptor = self.build(method, template, params, request_options)
        return await self.throttle.submit(lambda: self._send(descriptor))

    async def _send(self, descriptor: RequestDescriptor) -> Any:  # noqa: ANN401
        debug(f"{descriptor.method.value} {descriptor.path}")
        response = await self._get_client().request(**descriptor.to_httpx())
        if response.is_error:
            warn(
                f"{descriptor.method.value} {descriptor.path} "
                f"returned HTTP {response.status_code}"
            )
        return response.json()
