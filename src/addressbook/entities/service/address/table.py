"""Address database table model."""

from sqlmodel import Field, SQLModel


class AddressTable(SQLModel, table=True):
    """Database persistence model for address book entries.

    Both name columns are indexed; listings filter on name prefixes and
    order by either name with ``id`` as tie-break.
    """

    __tablename__ = "addresses"

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(index=True, nullable=False)
    last_name: str = Field(index=True, nullable=False)
    phone: str | None = None
