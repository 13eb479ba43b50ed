"""Address repository."""

from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.addressbook.core.errors import NotFoundError, StoreError
from src.addressbook.core.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    ListingRequest,
    Page,
    build_listing_query,
    is_storable_id,
    next_token,
)

from .entity import Address, AddressCreate
from .table import AddressTable


class AddressRepository:
    """Data-access layer for address book entries.

    Writes are flushed, not committed; the caller owns the transaction.
    Database failures surface as :class:`StoreError`.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, address_id: int) -> Address | None:
        if not is_storable_id(address_id):
            return None
        try:
            row = self._session.get(AddressTable, address_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        if row is None:
            return None
        return Address.model_validate(row, from_attributes=True)

    def require(self, address_id: int) -> Address:
        """Like :meth:`get`, but raise :class:`NotFoundError` for an unknown id."""
        address = self.get(address_id)
        if address is None:
            raise NotFoundError(f"no entry with id {address_id}")
        return address

    def create(self, address: AddressCreate) -> Address:
        row = AddressTable(**address.model_dump())
        try:
            self._session.add(row)
            self._session.flush()
            self._session.refresh(row)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return Address.model_validate(row, from_attributes=True)

    def add_all(self, addresses: Iterable[AddressCreate]) -> int:
        """Insert many entries at once and return how many were added."""
        rows = [AddressTable(**address.model_dump()) for address in addresses]
        if not rows:
            return 0
        try:
            self._session.add_all(rows)
            self._session.flush()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return len(rows)

    def delete(self, address_id: int) -> bool:
        """Delete an entry; ``False`` when no entry had that id."""
        if not is_storable_id(address_id):
            return False
        try:
            row = self._session.get(AddressTable, address_id)
            if row is None:
                return False
            self._session.delete(row)
            self._session.flush()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return True

    def count(self) -> int:
        try:
            return self._session.exec(select(func.count()).select_from(AddressTable)).one()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    def list_page(
        self,
        request: ListingRequest,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> Page[Address]:
        """Fetch one page of entries.

        A malformed continuation token raises ``ClientInputError`` before the
        database is queried.
        """
        statement = build_listing_query(
            AddressTable, request, default_limit=default_limit, max_limit=max_limit
        )
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return Page(
            items=[Address.model_validate(row, from_attributes=True) for row in rows],
            next_token=next_token(rows, request.sort),
        )
