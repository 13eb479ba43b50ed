"""Response bodies for the address endpoints."""

from pydantic import BaseModel, Field

from src.addressbook.entities.service.address import Address


class AddressListResponse(BaseModel):
    success: bool = True
    addresses: list[Address]
    next: str | None = Field(
        default=None,
        description="URL of the next page, or null when this page is empty",
    )


class AddressDetailResponse(Address):
    success: bool = True


class AddressCreatedResponse(BaseModel):
    success: bool = True
    id: int


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
