"""Keyset pagination over SQLModel tables.

``build_listing_query`` turns a :class:`ListingRequest` into a bounded,
totally ordered ``SELECT``:

* ``search`` keeps rows whose first or last name starts with the term,
* ``sort`` orders by that name column with ``id`` as tie-break, or by ``id``
  alone,
* ``last`` seeks strictly past the row a previous page ended on.

The model passed in must expose ``id``, ``first_name`` and ``last_name``
columns.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import and_, or_
from sqlmodel import col, select
from sqlmodel.sql.expression import SelectOfScalar

from src.addressbook.core.pagination.cursor import CursorCodec, CursorData, SortField

T = TypeVar("T")

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class ListingRequest:
    """Parameters of one list call, as received from the client."""

    search: str | None = None
    sort: SortField = SortField.NONE
    last: str | None = None
    limit: int | None = None


@dataclass
class Page(Generic[T]):
    """One page of results and the token that continues after it."""

    items: list[T]
    next_token: str | None


def normalize_limit(
    limit: int | None,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> int:
    """Clamp a requested page size: absent or non-positive -> default, too large -> max."""
    if limit is None or limit <= 0:
        return default_limit
    if limit > max_limit:
        return max_limit
    return limit


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_listing_query(
    model: Any,
    request: ListingRequest,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> SelectOfScalar[Any]:
    """Build the SELECT for one page of ``model`` rows.

    The continuation token is decoded first, so a malformed ``last`` raises
    :class:`~src.addressbook.core.errors.ClientInputError` before any SQL
    runs.
    """
    cursor = (
        CursorCodec.decode(request.last, request.sort)
        if request.last is not None
        else None
    )
    id_column = col(model.id)

    statement = select(model)

    if request.search is not None:
        pattern = escape_like(request.search) + "%"
        statement = statement.where(
            or_(
                col(model.first_name).like(pattern, escape=LIKE_ESCAPE),
                col(model.last_name).like(pattern, escape=LIKE_ESCAPE),
            )
        )

    if request.sort.is_name:
        name_column = col(getattr(model, request.sort.value))
        statement = statement.order_by(name_column, id_column)
        if cursor is not None:
            statement = statement.where(
                or_(
                    and_(name_column == cursor.name, id_column > cursor.id),
                    name_column > cursor.name,
                )
            )
    else:
        statement = statement.order_by(id_column)
        if cursor is not None:
            statement = statement.where(id_column > cursor.id)

    return statement.limit(normalize_limit(request.limit, default_limit, max_limit))


def next_token(rows: Sequence[Any], sort: SortField) -> str | None:
    """Token continuing after the last of ``rows``; ``None`` for an empty page."""
    if not rows:
        return None
    last_row = rows[-1]
    name = getattr(last_row, sort.value) if sort.is_name else None
    return CursorCodec.encode(CursorData(id=last_row.id, name=name))
