"""Tests for the token/session handshake."""

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from moviedb import AuthenticationError, MovieDb
from moviedb.auth import SessionManager
from moviedb.models import AuthenticationToken, parse_expiry

TOKEN_URL = "https://api.themoviedb.org/3/authentication/token/new"
SESSION_URL = "https://api.themoviedb.org/3/authentication/session/new"

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for expiry checks."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def token_payload(token: str, expires: datetime) -> dict:
    return {
        "success": True,
        "expires_at": expires.strftime("%Y-%m-%d %H:%M:%S UTC"),
        "request_token": token,
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def movie_db(client: MovieDb, clock: FakeClock) -> MovieDb:
    client.sessions = SessionManager(client.auth, client.request, now=clock)
    return client


def test_parse_expiry_formats() -> None:
    assert parse_expiry("2016-08-26 17:04:39 UTC") == datetime(
        2016, 8, 26, 17, 4, 39, tzinfo=timezone.utc
    )
    assert parse_expiry("2016-08-26T17:04:39+00:00") == datetime(
        2016, 8, 26, 17, 4, 39, tzinfo=timezone.utc
    )


def test_token_expiry_is_strict() -> None:
    token = AuthenticationToken(request_token="t", expires_at="2024-05-01 12:00:00 UTC")
    assert not token.is_expired(NOW)
    assert token.is_expired(NOW + timedelta(seconds=1))


@pytest.mark.asyncio
class TestRequestToken:
    """Token caching and refresh."""

    async def test_cached_within_validity(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        route = respx_mock.get(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_payload("t1", NOW + timedelta(hours=1)))
        )
        first = await movie_db.request_token()
        second = await movie_db.request_token()
        assert route.call_count == 1
        assert first is second
        assert first.request_token == "t1"
        assert route.calls.last.request.url.params["api_key"] == "test-api-key"

    async def test_refreshed_after_expiry(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb, clock: FakeClock
    ) -> None:
        route = respx_mock.get(TOKEN_URL).mock(
            side_effect=[
                httpx.Response(200, json=token_payload("t1", NOW + timedelta(hours=1))),
                httpx.Response(200, json=token_payload("t2", NOW + timedelta(hours=3))),
            ]
        )
        await movie_db.request_token()
        clock.now = NOW + timedelta(hours=2)
        refreshed = await movie_db.request_token()
        assert route.call_count == 2
        assert refreshed.request_token == "t2"
        assert movie_db.auth.token is refreshed

    async def test_concurrent_callers_share_refresh(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        route = respx_mock.get(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_payload("t1", NOW + timedelta(hours=1)))
        )
        tokens = await asyncio.gather(movie_db.request_token(), movie_db.request_token())
        assert route.call_count == 1
        assert tokens[0] is tokens[1]

    async def test_failure_payload_raises(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        failure = {
            "success": False,
            "status_code": 7,
            "status_message": "Invalid API key: You must be granted a valid key.",
        }
        respx_mock.get(TOKEN_URL).mock(return_value=httpx.Response(401, json=failure))
        with pytest.raises(AuthenticationError, match="Invalid API key") as excinfo:
            await movie_db.request_token()
        assert excinfo.value.payload == failure
        assert movie_db.auth.token is None

    async def test_transport_error_propagates(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        respx_mock.get(TOKEN_URL).mock(side_effect=httpx.ConnectError("unreachable"))
        with pytest.raises(httpx.ConnectError):
            await movie_db.request_token()


@pytest.mark.asyncio
class TestRetrieveSession:
    """Token -> session exchange."""

    async def test_session_stored_and_used(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        respx_mock.get(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_payload("t1", NOW + timedelta(hours=1)))
        )
        session_route = respx_mock.get(SESSION_URL).mock(
            return_value=httpx.Response(200, json={"success": True, "session_id": "s1"})
        )
        favorites = respx_mock.get(
            url__startswith="https://api.themoviedb.org/3/account/"
        ).mock(return_value=httpx.Response(200, json={"results": []}))

        assert await movie_db.retrieve_session() == "s1"
        assert movie_db.session_id == "s1"
        assert session_route.calls.last.request.url.params["request_token"] == "t1"

        await movie_db.account_favorite_movies()
        sent = favorites.calls.last.request
        assert sent.url.path == "/3/account/{account_id}/favorite/movies"
        assert sent.url.params["session_id"] == "s1"

    async def test_each_call_exchanges_again(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        token_route = respx_mock.get(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_payload("t1", NOW + timedelta(hours=1)))
        )
        session_route = respx_mock.get(SESSION_URL).mock(
            side_effect=[
                httpx.Response(200, json={"success": True, "session_id": "s1"}),
                httpx.Response(200, json={"success": True, "session_id": "s2"}),
            ]
        )
        await movie_db.retrieve_session()
        assert await movie_db.retrieve_session() == "s2"
        assert token_route.call_count == 1
        assert session_route.call_count == 2

    async def test_denied_session_raises(
        self, respx_mock: respx.MockRouter, movie_db: MovieDb
    ) -> None:
        respx_mock.get(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_payload("t1", NOW + timedelta(hours=1)))
        )
        respx_mock.get(SESSION_URL).mock(
            return_value=httpx.Response(
                401,
                json={"success": False, "status_code": 17, "status_message": "Session denied."},
            )
        )
        with pytest.raises(AuthenticationError, match="Session denied"):
            await movie_db.retrieve_session()
        assert movie_db.session_id is None
