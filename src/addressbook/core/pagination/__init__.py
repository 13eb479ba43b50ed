"""Cursor-based pagination for list endpoints."""

from .cursor import ID_MAX, ID_MIN, CursorCodec, CursorData, SortField, is_storable_id
from .listing import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    ListingRequest,
    Page,
    build_listing_query,
    escape_like,
    next_token,
    normalize_limit,
)

__all__ = [
    "CursorCodec",
    "CursorData",
    "SortField",
    "ID_MAX",
    "ID_MIN",
    "is_storable_id",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "ListingRequest",
    "Page",
    "build_listing_query",
    "escape_like",
    "next_token",
    "normalize_limit",
]
