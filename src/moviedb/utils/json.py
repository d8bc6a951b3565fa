"""JSON helpers for request bodies.

Request parameters may carry dates (``start_date`` on the changes endpoints)
or enums; the standard encoder rejects both. Bodies are written compactly,
the way the API's own examples show them.
"""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Self


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that understands dates, datetimes and enums."""

    def default(self: Self, obj: object) -> Any:  # noqa: ANN401
        """Convert *obj* to a JSON-serializable value.

        - datetime: ISO 8601 string
        - date: ``YYYY-MM-DD``
        - Enum: its value
        """
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def dumps_body(data: Any) -> str:  # noqa: ANN401
    """Serialize *data* as a compact JSON request body."""
    return json.dumps(data, cls=DateTimeEncoder, separators=(",", ":"))
