"""JSON response building and tolerant decoding of stored values."""

import json
import logging
from typing import Any

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class _Invalid:
    """Marker for stored text that is not valid JSON."""

    def __repr__(self) -> str:
        return "INVALID"


INVALID = _Invalid()


def encode(body: Any, status_code: int = 200, extra_headers: dict[str, str] | None = None) -> JSONResponse:
    """Build a JSON response, merging extra headers over the defaults."""
    headers = {**JSON_HEADERS, **(extra_headers or {})}
    return JSONResponse(content=body, status_code=status_code, headers=headers)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def decode(raw: str | bytes) -> Any:
    """Parse stored JSON text.

    ``NaN`` and ``Infinity`` are not JSON and cannot be encoded back into
    a response, so they are rejected like any other malformed text.

    Returns:
        The decoded value, or INVALID when the text cannot be parsed.
        A decoded JSON ``null`` comes back as None, which is not INVALID.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError, TypeError) as e:
        logger.error("JSON parse error: %s", e)
        return INVALID
