class PaginateError(Exception):
    """Base exception for all pygoose-paginate errors."""


class NotConnected(PaginateError):
    """Raised when attempting to use a database that is not connected."""
