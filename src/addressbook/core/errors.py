"""Domain errors raised by the address book core.

Routers translate these into HTTP responses; nothing below the API layer
knows about status codes.
"""


class AddressBookError(RuntimeError):
    """Base class for address book failures."""


class ClientInputError(AddressBookError):
    """The caller supplied a malformed or incomplete request."""


class NotFoundError(AddressBookError):
    """No address exists with the requested identifier."""


class StoreError(AddressBookError):
    """The underlying database operation failed."""
