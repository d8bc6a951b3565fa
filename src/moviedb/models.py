"""Data models shared by the moviedb request pipeline.

- HttpMethod enumerates the verbs the API uses.
- AuthenticationToken and SessionResponse describe the two payloads the
  authentication handshake depends on. Every other response is returned as
  decoded JSON without a model.

Design:
- Tokens are immutable once parsed; a refresh replaces the whole object.
- expires_at is kept as the raw string the API sent, with a parsed view for
  expiry checks.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, field_validator

# A bare id/query or a full parameter mapping, resolved once by
# moviedb.endpoint.normalize_params.
Params = Union[str, int, float, Mapping[str, Any], None]

TOKEN_EXPIRY_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class HttpMethod(str, Enum):
    """HTTP verbs used by the API. There is no PUT or PATCH."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class AuthenticationToken(BaseModel):
    """Request token issued by ``authentication/token/new``."""

    model_config = ConfigDict(frozen=True, extra="allow")

    request_token: str
    expires_at: str
    success: bool = True

    @field_validator("expires_at")
    @classmethod
    def _check_expiry(cls, value: str) -> str:
        parse_expiry(value)
        return value

    @property
    def expires(self) -> datetime:
        """Parsed ``expires_at`` as an aware UTC datetime."""
        return parse_expiry(self.expires_at)

    def is_expired(self, now: datetime) -> bool:
        """Return True when *now* is strictly later than the expiry."""
        return now > self.expires


class SessionResponse(BaseModel):
    """Payload returned by ``authentication/session/new``."""

    model_config = ConfigDict(frozen=True, extra="allow")

    session_id: str
    success: bool = True


def parse_expiry(value: str) -> datetime:
    """Parse an API expiry timestamp.

    The API sends ``"2016-08-26 17:04:39 UTC"``; ISO 8601 strings are accepted
    too. Naive values are treated as UTC.

    Raises:
        ValueError: If *value* matches neither format.
    """
    try:
        parsed = datetime.strptime(value, TOKEN_EXPIRY_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
