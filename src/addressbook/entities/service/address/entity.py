"""Entity: Address."""

from pydantic import BaseModel, Field


class Address(BaseModel):
    """A stored address book entry.

    The identifier is assigned by the database on insert and never changes.
    """

    id: int = Field(description="Identifier assigned by the store")
    first_name: str = Field(description="First name")
    last_name: str = Field(description="Last name")
    phone: str | None = Field(default=None, description="Phone number")


class AddressCreate(BaseModel):
    """Fields a client supplies to create an address book entry."""

    first_name: str = Field(min_length=1, description="First name")
    last_name: str = Field(min_length=1, description="Last name")
    phone: str | None = Field(default=None, description="Phone number")
