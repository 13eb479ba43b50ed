"""Entity package: Address."""

from .entity import Address, AddressCreate
from .table import AddressTable
from .repository import AddressRepository

__all__ = ["Address", "AddressCreate", "AddressRepository", "AddressTable"]
