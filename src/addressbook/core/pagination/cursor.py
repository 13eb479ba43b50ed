"""Continuation tokens for keyset pagination.

A token is the URL-safe base64 encoding (padding stripped) of a compact JSON
object holding the id of the last row on a page and, for name-sorted pages,
the sorted name of that row::

    {"id": 42}                      # id-ordered pages
    {"id": 42, "name": "Thompson"}  # first_name / last_name ordered pages

The encoding is opaque to clients and unambiguous for any name content.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum

from src.addressbook.core.errors import ClientInputError

# Signed 64-bit range of an INTEGER primary key
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


def is_storable_id(value: int) -> bool:
    """Whether ``value`` fits the id column and can be bound to a query."""
    return ID_MIN <= value <= ID_MAX


class SortField(str, Enum):
    """Orderings a listing can request; anything else falls back to ``NONE``."""

    NONE = "none"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"

    @classmethod
    def parse(cls, value: str | None) -> SortField:
        if value is None:
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return cls.NONE

    @property
    def is_name(self) -> bool:
        return self is not SortField.NONE


@dataclass(frozen=True)
class CursorData:
    """Position of the last row returned on a page."""

    id: int
    name: str | None = None


class CursorCodec:
    """Encode and decode opaque continuation tokens."""

    @staticmethod
    def encode(cursor: CursorData) -> str:
        payload: dict[str, object] = {"id": cursor.id}
        if cursor.name is not None:
            payload["name"] = cursor.name
        raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        return base64.urlsafe_b64encode(raw.encode("utf-8")).rstrip(b"=").decode("ascii")

    @staticmethod
    def decode(token: str, sort: SortField) -> CursorData:
        """Parse ``token`` for a page ordered by ``sort``.

        Raises:
            ClientInputError: if the token is not one this codec produced for
                the given ordering.
        """
        try:
            padded = token + "=" * (-len(token) % 4)
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeError, binascii.Error, ValueError) as e:
            raise ClientInputError(f"invalid last key: {token}") from e

        if not isinstance(payload, dict):
            raise ClientInputError(f"invalid last key: {token}")

        cursor_id = payload.get("id")
        # bool is an int subclass; reject it explicitly
        if (
            not isinstance(cursor_id, int)
            or isinstance(cursor_id, bool)
            or not is_storable_id(cursor_id)
        ):
            raise ClientInputError(f"invalid last key: {token}")

        if not sort.is_name:
            return CursorData(id=cursor_id)

        name = payload.get("name")
        if not isinstance(name, str):
            raise ClientInputError(f"invalid last key for sort {sort.value}: {token}")
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            # lone surrogates survive json.loads but cannot be sent to the database
            raise ClientInputError(f"invalid last key: {token}") from e
        return CursorData(id=cursor_id, name=name)
