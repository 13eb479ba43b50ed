"""Entities organized by business concept.

Each entity package keeps its domain model (entity.py), persistence model
(table.py) and data access layer (repository.py) together.
"""

from .service.address import Address, AddressCreate, AddressRepository, AddressTable

__all__ = ["Address", "AddressCreate", "AddressRepository", "AddressTable"]
