"""Shared fixtures for moviedb tests."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from moviedb import MovieDb

API_KEY = "test-api-key"
BASE_URL = "https://api.themoviedb.org/3/"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:  # noqa: ANN001
    """Keep real MOVIEDB_* variables and user config out of the tests."""
    for name in ("MOVIEDB_API_KEY", "MOVIEDB_BASE_URL", "MOVIEDB_REQUESTS_PER_SECOND", "MOVIEDB_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest_asyncio.fixture
async def client() -> AsyncIterator[MovieDb]:
    """A client with a generous rate limit, closed after the test."""
    async with MovieDb(API_KEY, requests_per_second=1000) as movie_db:
        yield movie_db
