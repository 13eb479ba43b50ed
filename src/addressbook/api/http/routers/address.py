"""Address API router: list, get, create and delete."""

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.addressbook.api.http.deps import (
    get_address_repository,
    get_db_session,
    get_pagination_config,
)
from src.addressbook.api.http.schemas import (
    AddressCreatedResponse,
    AddressDetailResponse,
    AddressListResponse,
    ErrorResponse,
    SuccessResponse,
)
from src.addressbook.core.errors import ClientInputError, NotFoundError, StoreError
from src.addressbook.core.pagination import ListingRequest, SortField
from src.addressbook.entities.service.address import AddressCreate, AddressRepository
from src.addressbook.runtime.config.config_data import PaginationConfig

router = APIRouter(
    prefix="/address",
    tags=["address"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def _next_page_url(request: Request, token: str) -> str:
    """The current request URL, path and query only, with ``last`` replaced."""
    url = request.url.include_query_params(last=token)
    return f"{url.path}?{url.query}"


@router.get("", response_model=AddressListResponse)
def list_addresses(
    request: Request,
    sort: str | None = None,
    search: str | None = None,
    last: str | None = None,
    limit: int | None = None,
    repository: AddressRepository = Depends(get_address_repository),
    pagination: PaginationConfig = Depends(get_pagination_config),
) -> AddressListResponse:
    """List addresses, optionally filtered by name prefix and sorted by name.

    Follow ``next`` to fetch the following page.
    """
    listing = ListingRequest(
        search=search, sort=SortField.parse(sort), last=last, limit=limit
    )
    try:
        page = repository.list_page(
            listing,
            default_limit=pagination.default_limit,
            max_limit=pagination.max_limit,
        )
    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StoreError as e:
        logger.error("Listing addresses failed: {}", e)
        raise HTTPException(status_code=404, detail=str(e)) from e

    return AddressListResponse(
        addresses=page.items,
        next=_next_page_url(request, page.next_token) if page.next_token else None,
    )


@router.get("/{address_id}", response_model=AddressDetailResponse)
def get_address(
    address_id: int,
    repository: AddressRepository = Depends(get_address_repository),
) -> AddressDetailResponse:
    """Get an address by ID."""
    try:
        address = repository.require(address_id)
    except (NotFoundError, StoreError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return AddressDetailResponse(**address.model_dump())


@router.post(
    "",
    response_model=AddressCreatedResponse,
    responses={500: {"model": ErrorResponse}},
)
def create_address(
    address: AddressCreate,
    session: Session = Depends(get_db_session),
) -> AddressCreatedResponse:
    """Create a new address."""
    repository = AddressRepository(session)
    try:
        created = repository.create(address)
        session.commit()
    except (StoreError, SQLAlchemyError) as e:
        session.rollback()
        logger.error("Creating address failed: {}", e)
        raise HTTPException(status_code=500, detail=str(e)) from e

    logger.info("Created address {}", created.id)
    return AddressCreatedResponse(id=created.id)


@router.delete("/{address_id}", response_model=SuccessResponse)
def delete_address(
    address_id: int,
    session: Session = Depends(get_db_session),
) -> SuccessResponse:
    """Delete an address."""
    repository = AddressRepository(session)
    try:
        deleted = repository.delete(address_id)
        session.commit()
    except (StoreError, SQLAlchemyError) as e:
        session.rollback()
        raise HTTPException(status_code=404, detail=str(e)) from e

    if not deleted:
        raise HTTPException(status_code=404, detail=f"no entry with id {address_id}")

    logger.info("Deleted address {}", address_id)
    return SuccessResponse()
