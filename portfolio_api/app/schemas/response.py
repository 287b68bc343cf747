"""
Response envelope returned by every service operation.

Services never raise to their callers; they return an ``Envelope``
carrying a human readable ``message``, the ``payload`` (records, a page
object, validation errors or an error text) and a ``status`` taken from
the closed ``StatusCode`` enumeration.  The builder functions below keep
the default messages in one place.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class StatusCode(IntEnum):
    """Outcome codes of an envelope.  Values match the HTTP status codes."""

    SUCCESS = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    ERROR = 500


class Envelope(BaseModel):
    message: str
    payload: Any = None
    status: StatusCode

    @property
    def is_success(self) -> bool:
        return self.status == StatusCode.SUCCESS


def success_envelope(payload: Any = None, message: str = "Data is fetched successfully") -> Envelope:
    return Envelope(message=message, payload=payload, status=StatusCode.SUCCESS)


def not_found_envelope(message: str = "No result found") -> Envelope:
    return Envelope(message=message, payload=None, status=StatusCode.NOT_FOUND)


def bad_request_envelope(
    errors: Dict[str, List[str]],
    message: str = "Validation Error",
) -> Envelope:
    """Create a validation failure envelope with per-field messages."""
    return Envelope(message=message, payload=errors, status=StatusCode.BAD_REQUEST)


def error_envelope(payload: Optional[Any] = None, message: str = "Something went wrong") -> Envelope:
    """Create an error envelope.

    Used both for unexpected exceptions (``payload`` is the error text)
    and for mutations that affected nothing (``payload`` is ``None``).
    """
    return Envelope(message=message, payload=payload, status=StatusCode.ERROR)
