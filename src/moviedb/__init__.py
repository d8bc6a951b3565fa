# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""moviedb - async client for The Movie Database (TMDB) API."""

from moviedb.__about__ import __version__
from moviedb.auth import AuthenticationError, AuthState, SessionManager
from moviedb.client import MovieDb
from moviedb.endpoints import Endpoint
from moviedb.models import AuthenticationToken, HttpMethod, SessionResponse
from moviedb.settings import MissingAPIKeyError, Settings
from moviedb.throttle import Throttle
from moviedb.utils.debug import setup_logger

__all__ = [
    "__version__",
    "AuthenticationError",
    "AuthState",
    "AuthenticationToken",
    "Endpoint",
    "HttpMethod",
    "MissingAPIKeyError",
    "MovieDb",
    "SessionManager",
    "SessionResponse",
    "Settings",
    "Throttle",
    "setup_logger",
]
