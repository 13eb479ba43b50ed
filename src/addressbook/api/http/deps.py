"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.addressbook.api.http.app_data import ApplicationDependencies
from src.addressbook.entities.service.address import AddressRepository
from src.addressbook.runtime.config.config_data import PaginationConfig


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies built at application startup."""
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session scoped to the current request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_address_repository(
    session: Session = Depends(get_db_session),
) -> AddressRepository:
    return AddressRepository(session)


def get_pagination_config(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> PaginationConfig:
    return app_deps.config.pagination
